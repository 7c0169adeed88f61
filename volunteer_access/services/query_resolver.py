"""Hierarchical query resolution, the one place precedence is defined.

Design:
    - Permissions form a tree: ``test`` covers ``test.boolean`` covers
      ``test.boolean.required.team``.
    - A query walks from the queried node towards the root. Permission-level
      rules on each node are candidates; for CRUD queries, operation-level
      rules naming the queried operation are candidates too.
    - Only rules whose scope matches the query's scope are considered
      (see ``scope_matcher``).
    - The most specific candidate wins, ranked by:
        1. depth of the rule's path
        2. operation-level over permission-level
        3. number of concrete scope dimensions
        4. revoke over grant
    - No candidate at any depth = no opinion (``None``).
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Mapping, Optional, Union

from ..exceptions import InvalidQueryError, ScopeRequiredError
from ..models.permission import Operation, PermissionDefinition
from ..models.rule import Polarity, Rule, Scope
from ..models.verdict import GLOBAL_SCOPE, AccessResult, Verdict
from .catalog import PermissionCatalog
from .permission_syntax import ancestors, parse_permission
from .scope_matcher import scope_matches

OperationInput = Union[Operation, str, None]
ScopeInput = Union[Scope, Mapping[str, Any], None]

_RuleKey = tuple[str, Optional[Operation]]


class RuleIndex:
    """Rules of both polarities keyed by ``(path, operation)``.

    Lets the ancestor walk fetch the rules of a node with one dict lookup
    instead of scanning every rule per level.
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        grouped: dict[_RuleKey, list[Rule]] = defaultdict(list)
        for rule in rules:
            grouped[(rule.path, rule.operation)].append(rule)
        self._rules: dict[_RuleKey, tuple[Rule, ...]] = {
            key: tuple(entries) for key, entries in grouped.items()
        }

    def at(self, path: str, operation: Optional[Operation] = None) -> tuple[Rule, ...]:
        return self._rules.get((path, operation), ())

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._rules.values())


def _precedence(rule: Rule) -> tuple[int, bool, int, bool]:
    return (
        rule.depth,
        rule.is_operation_level,
        rule.scope.specificity,
        rule.polarity is Polarity.REVOKE,
    )


def select_rule(
    index: RuleIndex,
    path: str,
    operation: Optional[Operation],
    scope: Scope,
) -> Optional[Rule]:
    """Find the rule governing *path* (and *operation*) within *scope*."""
    for node in ancestors(path):
        candidates = index.at(node)
        if operation is not None:
            candidates = candidates + index.at(node, operation)

        matching = [rule for rule in candidates if scope_matches(rule, scope)]
        if matching:
            # Depth is the primary key, so the first node with a match decides.
            return max(matching, key=_precedence)

    return None


def _coerce_operation(permission: str, value: OperationInput) -> Optional[Operation]:
    if value is None or isinstance(value, Operation):
        return value
    try:
        return Operation(value)
    except ValueError:
        raise InvalidQueryError(f"Unknown operation {value!r}", permission) from None


def _check_operation(
    definition: Optional[PermissionDefinition],
    path: str,
    operation: Optional[Operation],
) -> None:
    """Validate the operation against the kind of the nearest declared ancestor."""
    if definition is None:
        return
    if definition.is_crud and operation is None:
        raise InvalidQueryError(
            f"Permission {path} is a CRUD permission, an operation is required", path
        )
    if not definition.is_crud and operation is not None:
        raise InvalidQueryError(
            f"Permission {path} is a boolean permission, operation {operation.value} is not supported",
            path,
        )


def _check_scope(definition: Optional[PermissionDefinition], path: str, scope: Scope) -> None:
    if definition is None:
        return

    missing = []
    if definition.requires_event and scope.event is None:
        missing.append("event")
    if definition.requires_team and scope.team is None:
        missing.append("team")

    if missing:
        raise ScopeRequiredError(path, missing)


def resolve(
    index: RuleIndex,
    catalog: PermissionCatalog,
    permission: str,
    operation: OperationInput = None,
    scope: ScopeInput = None,
) -> Optional[Verdict]:
    """Resolve a single query against the indexed rules.

    Args:
        index: The principal's grants and revokes.
        catalog: Permission catalog supplying kinds and scope requirements.
        permission: Permission path, optionally with an inline ``:operation``.
        operation: CRUD operation, required for ``crud`` permissions.
        scope: ``Scope`` or ``{event, team}`` mapping the caller asks about.

    Returns:
        The verdict of the winning rule, or None when no rule applies.

    Raises:
        InvalidPermissionError: If *permission* is not valid syntax.
        InvalidQueryError: If the operation does not fit the permission's kind.
        InvalidScopeError: If *scope* is malformed.
        ScopeRequiredError: If the permission needs an event or team that *scope* lacks.
    """
    path, inline_operation = parse_permission(permission)
    operation = _coerce_operation(permission, operation)
    if inline_operation is not None:
        if operation is not None and operation is not inline_operation:
            raise InvalidQueryError(
                f"Conflicting operations {inline_operation.value} and {operation.value}", permission
            )
        operation = inline_operation

    _check_operation(catalog.nearest_definition(path), path, operation)

    query_scope = Scope.coerce(scope)
    definition = catalog.definition_for(path)
    _check_scope(definition, path, query_scope)

    winner = select_rule(index, path, operation, query_scope)
    if winner is None:
        return None

    is_global = winner.scope.is_global
    return Verdict(
        result=AccessResult.GRANTED if winner.polarity is Polarity.GRANT else AccessResult.REVOKED,
        crud=winner.is_operation_level,
        expanded=not (winner.path == path and winner.operation is operation),
        global_=is_global,
        scope=GLOBAL_SCOPE if definition is not None and definition.requires_scope and is_global else None,
    )
