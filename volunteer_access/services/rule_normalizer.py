"""Turns caller-supplied grants and revokes into flat rule lists.

Accepted entry forms, alone or mixed in an iterable:

    "event.visible"                            # unscoped rule
    "test.crud:delete,statistics.basic"        # comma separated storage format
    {"permission": "senior", "event": "2025"}  # scoped record
    AccessRuleInput(permission="staff", team="crew")

Permission groups are expanded here, once, with each member inheriting the
scope of the entry that named the group.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Union

from pydantic import ValidationError

from ..exceptions import InvalidPermissionError, InvalidRuleError
from ..models.rule import UNSCOPED, Polarity, Rule, Scope, ScopeValue, Wildcard
from ..schemas.rule import AccessRuleInput
from .builtin_permissions import VISIBILITY_PERMISSION
from .catalog import PermissionCatalog
from .permission_syntax import parse_permission

logger = logging.getLogger(__name__)

RuleEntry = Union[str, Mapping[str, Any], AccessRuleInput]
RuleInput = Union[RuleEntry, Iterable[RuleEntry], None]
DefaultsInput = Union[str, Wildcard, Iterable[str], None]


@dataclass(frozen=True)
class NormalizedRules:
    grants: tuple[Rule, ...]
    revokes: tuple[Rule, ...]
    events: tuple[ScopeValue, ...] = ()
    teams: tuple[ScopeValue, ...] = ()


def normalize_rules(
    grants: RuleInput,
    revokes: RuleInput,
    *,
    catalog: PermissionCatalog,
    events: DefaultsInput = None,
    teams: DefaultsInput = None,
) -> NormalizedRules:
    """Build the grant and revoke rules of a principal.

    Args:
        grants: Grant entries in any of the accepted forms.
        revokes: Revoke entries in any of the accepted forms.
        catalog: Catalog used for permission group expansion.
        events: Events the principal participates in, or ``ANY_EVENT``.
        teams: Teams the principal participates in, or ``ANY_TEAM``.

    Raises:
        InvalidRuleError: If an entry is malformed.
        InvalidScopeError: If a scope value is empty or misplaced.
    """
    grant_rules = list(_build_rules(grants, Polarity.GRANT, catalog))
    revoke_rules = list(_build_rules(revokes, Polarity.REVOKE, catalog))

    default_events = _parse_defaults(events, "event")
    default_teams = _parse_defaults(teams, "team")
    grant_rules.extend(_participation_grants(grant_rules, default_events, default_teams))

    logger.debug(
        "Access rules normalized",
        extra={"grants": len(grant_rules), "revokes": len(revoke_rules)},
    )
    return NormalizedRules(
        grants=tuple(grant_rules),
        revokes=tuple(revoke_rules),
        events=default_events,
        teams=default_teams,
    )


def _iter_entries(value: RuleInput) -> Iterator[RuleEntry]:
    if value is None:
        return
    if isinstance(value, (str, Mapping, AccessRuleInput)):
        yield value
        return
    if not isinstance(value, Iterable):
        raise InvalidRuleError(f"Unsupported access rules: {type(value).__name__}", value)
    yield from value


def _build_rules(value: RuleInput, polarity: Polarity, catalog: PermissionCatalog) -> Iterator[Rule]:
    for entry in _iter_entries(value):
        if isinstance(entry, str):
            for piece in entry.split(","):
                piece = piece.strip()
                if piece:
                    yield from _expand(piece, polarity, UNSCOPED, catalog)
            continue

        record = _coerce_record(entry)
        scope = Scope(event=record.event, team=record.team)
        yield from _expand(record.permission, polarity, scope, catalog)


def _coerce_record(entry: Any) -> AccessRuleInput:
    if isinstance(entry, AccessRuleInput):
        return entry
    if isinstance(entry, Mapping):
        try:
            return AccessRuleInput.model_validate(dict(entry))
        except ValidationError as e:
            raise InvalidRuleError(f"Invalid access rule: {e}", entry) from e
    raise InvalidRuleError(f"Unsupported access rule entry: {type(entry).__name__}", entry)


def _expand(permission: str, polarity: Polarity, scope: Scope, catalog: PermissionCatalog) -> Iterator[Rule]:
    # The catalog rejects group cycles, so this recursion terminates.
    members = catalog.group_members(permission)
    if members is not None:
        for member in members:
            yield from _expand(member, polarity, scope, catalog)
        return

    try:
        path, operation = parse_permission(permission)
    except InvalidPermissionError as e:
        raise InvalidRuleError(f"Invalid permission in access rule: {permission!r}", permission) from e

    yield Rule(path=path, polarity=polarity, operation=operation, scope=scope)


def _parse_defaults(value: DefaultsInput, dimension: str) -> tuple[ScopeValue, ...]:
    """Parse the principal's default events or teams into scope values."""
    if value is None:
        return ()
    if isinstance(value, str):
        pieces: Iterable[Any] = (value,) if isinstance(value, Wildcard) else value.split(",")
    elif isinstance(value, Iterable):
        pieces = value
    else:
        raise InvalidRuleError(f"Unsupported default {dimension}s: {type(value).__name__}", value)

    parsed: list[ScopeValue] = []
    for piece in pieces:
        if isinstance(piece, str) and not isinstance(piece, Wildcard) and not piece.strip():
            continue
        scope_value = getattr(Scope(**{dimension: Wildcard.from_text(piece)}), dimension)
        if scope_value not in parsed:
            parsed.append(scope_value)
    return tuple(parsed)


def _participation_grants(
    grants: list[Rule],
    events: tuple[ScopeValue, ...],
    teams: tuple[ScopeValue, ...],
) -> list[Rule]:
    """Grant visibility of the default teams in every event the principal works on."""
    if not teams:
        return []

    universe: list[ScopeValue] = []
    for rule in grants:
        event = rule.scope.event
        if event is not None and not isinstance(event, Wildcard) and event not in universe:
            universe.append(event)
    for event in events:
        if event not in universe:
            universe.append(event)

    return [
        Rule(path=VISIBILITY_PERMISSION, polarity=Polarity.GRANT, scope=Scope(event=event, team=team))
        for event in universe
        for team in teams
    ]

