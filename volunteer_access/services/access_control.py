"""AccessControl: the per-principal facade over the access control core.

Constructed once per principal per request from the grants and revokes the
role assembly code produced; immutable afterwards, so a single instance can
be queried from any number of threads or tasks.

    access = AccessControl(grants="test", revokes="test.boolean")
    access.can("test.crud", "create")                    # True
    access.can("test.boolean")                           # False
    access.can("event.visible", {"event": "2025", "team": "crew"})
    access.require("organisation.accounts", "update")    # raises AccessDeniedError
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..exceptions import AccessDeniedError, InvalidQueryError
from ..models.permission import Operation
from ..models.rule import Rule, Scope, ScopeValue
from ..models.verdict import AccessResult, Verdict
from .catalog import PermissionCatalog, default_catalog
from .query_resolver import OperationInput, RuleIndex, ScopeInput, resolve
from .rule_normalizer import DefaultsInput, RuleInput, normalize_rules


class AccessControl:
    """Answers permission queries for a single principal.

    Args:
        grants: Grant entries: permission strings (comma separated lists
            allowed), ``{permission, event?, team?}`` records, or a list of both.
        revokes: Revoke entries in the same forms as *grants*.
        events: Events the principal participates in, or ``ANY_EVENT``.
        teams: Teams the principal participates in, or ``ANY_TEAM``.
        catalog: Permission catalog; the process-wide default when omitted.
    """

    def __init__(
        self,
        grants: RuleInput = None,
        revokes: RuleInput = None,
        *,
        events: DefaultsInput = None,
        teams: DefaultsInput = None,
        catalog: Optional[PermissionCatalog] = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog
        rules = normalize_rules(
            grants, revokes, catalog=self._catalog, events=events, teams=teams
        )
        self._grants = rules.grants
        self._revokes = rules.revokes
        self._events = rules.events
        self._teams = rules.teams
        self._index = RuleIndex(self._grants + self._revokes)

    @property
    def grants(self) -> tuple[Rule, ...]:
        return self._grants

    @property
    def revokes(self) -> tuple[Rule, ...]:
        return self._revokes

    @property
    def events(self) -> tuple[ScopeValue, ...]:
        return self._events

    @property
    def teams(self) -> tuple[ScopeValue, ...]:
        return self._teams

    @property
    def catalog(self) -> PermissionCatalog:
        return self._catalog

    def query(
        self,
        permission: str,
        operation: Union[OperationInput, Scope, Mapping[str, Any]] = None,
        scope: ScopeInput = None,
    ) -> Optional[Verdict]:
        """Resolve *permission* to a verdict, or None when no rule governs it.

        The second argument is the operation for CRUD permissions. For boolean
        permissions it may be the scope instead, so both
        ``query("event.visible", {"event": "2025", "team": "crew"})`` and
        ``query("event.schedules", "read", {"event": "2025", "team": "crew"})``
        are valid.
        """
        operation, scope = self._split_arguments(permission, operation, scope)
        return resolve(self._index, self._catalog, permission, operation, scope)

    def can(
        self,
        permission: str,
        operation: Union[OperationInput, Scope, Mapping[str, Any]] = None,
        scope: ScopeInput = None,
    ) -> bool:
        """Return True only when the governing rule grants *permission*."""
        verdict = self.query(permission, operation, scope)
        return verdict is not None and verdict.result is AccessResult.GRANTED

    def require(
        self,
        permission: str,
        operation: Union[OperationInput, Scope, Mapping[str, Any]] = None,
        scope: ScopeInput = None,
    ) -> None:
        """Like ``can``, but raises ``AccessDeniedError`` instead of returning False."""
        operation, scope = self._split_arguments(permission, operation, scope)
        if not self.can(permission, operation, scope):
            raise AccessDeniedError(
                permission,
                operation.value if isinstance(operation, Operation) else operation,
                Scope.coerce(scope).as_dict(),
            )

    @staticmethod
    def _split_arguments(
        permission: str,
        operation: Union[OperationInput, Scope, Mapping[str, Any]],
        scope: ScopeInput,
    ) -> tuple[OperationInput, ScopeInput]:
        if isinstance(operation, (Scope, Mapping)):
            if scope is not None:
                raise InvalidQueryError("Scope given twice", permission)
            return None, operation
        return operation, scope

    def __repr__(self) -> str:
        return f"AccessControl(grants={len(self._grants)}, revokes={len(self._revokes)})"
