"""Scopes and the normalized grant/revoke rules built from them.

Rules are immutable once constructed. A rule's scope restricts *where* it
applies; a query's scope states *where* the caller is asking about. Each
dimension is either omitted, a concrete identifier, or the wildcard for
that dimension.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..exceptions import InvalidScopeError
from .permission import Operation


class Wildcard(str, Enum):
    """Scope value meaning "any event" or "any team"."""

    EVENT = "<any-event>"
    TEAM = "<any-team>"

    @classmethod
    def from_text(cls, value: Any) -> Any:
        """Map the textual form of a wildcard to its member, other values unchanged.

        Only rule data assembled by the host goes through here. Query scopes
        must pass the members themselves.
        """
        if isinstance(value, str) and not isinstance(value, cls) and value.strip() in cls._value2member_map_:
            return cls(value.strip())
        return value


ANY_EVENT = Wildcard.EVENT
ANY_TEAM = Wildcard.TEAM

ScopeValue = Union[str, Wildcard]

_DIMENSIONS = (("event", Wildcard.EVENT), ("team", Wildcard.TEAM))


def _coerce_dimension(name: str, wildcard: Wildcard, value: Any) -> Optional[ScopeValue]:
    if value is None:
        return None
    if isinstance(value, Wildcard):
        if value is not wildcard:
            raise InvalidScopeError(f"{value.name} wildcard used as {name} scope", field=name)
        return value
    if not isinstance(value, str):
        raise InvalidScopeError(f"Scope {name} must be a string, got {type(value).__name__}", field=name)
    value = value.strip()
    if not value:
        raise InvalidScopeError(f"Scope {name} must not be empty", field=name)
    if value in Wildcard._value2member_map_:
        raise InvalidScopeError(f"Scope {name} {value!r} is reserved for wildcards", field=name)
    return value


@dataclass(frozen=True)
class Scope:
    """An optional (event, team) pair.

    Concrete values are stripped of surrounding whitespace, so ``" 2024"``
    and ``"2024"`` name the same event. Wildcards must be passed as
    ``Wildcard`` members; their textual form is not a valid concrete value.
    """

    event: Optional[ScopeValue] = None
    team: Optional[ScopeValue] = None

    def __post_init__(self) -> None:
        for name, wildcard in _DIMENSIONS:
            object.__setattr__(self, name, _coerce_dimension(name, wildcard, getattr(self, name)))

    @classmethod
    def coerce(cls, value: Union["Scope", Mapping[str, Any], None]) -> "Scope":
        """Build a scope from ``None``, a ``Scope`` or an ``{event, team}`` mapping."""
        if value is None:
            return UNSCOPED
        if isinstance(value, Scope):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"event", "team"}
            if unknown:
                raise InvalidScopeError(f"Unknown scope fields: {', '.join(sorted(unknown))}")
            return cls(event=value.get("event"), team=value.get("team"))
        raise InvalidScopeError(f"Unsupported scope type: {type(value).__name__}")

    @property
    def specificity(self) -> int:
        """Number of dimensions pinned to a concrete identifier."""
        return sum(1 for name, _ in _DIMENSIONS if _is_concrete(getattr(self, name)))

    @property
    def is_global(self) -> bool:
        return self.specificity == 0

    def as_dict(self) -> dict[str, str]:
        rendered: dict[str, str] = {}
        for name, _ in _DIMENSIONS:
            value = getattr(self, name)
            if value is not None:
                rendered[name] = value.value if isinstance(value, Wildcard) else value
        return rendered


def _is_concrete(value: Optional[ScopeValue]) -> bool:
    return value is not None and not isinstance(value, Wildcard)


UNSCOPED = Scope()


class Polarity(str, Enum):
    GRANT = "grant"
    REVOKE = "revoke"


@dataclass(frozen=True)
class Rule:
    """A single grant or revoke.

    ``path`` never carries the ``:operation`` suffix; operation-level rules
    keep it in ``operation`` instead.
    """

    path: str
    polarity: Polarity
    operation: Optional[Operation] = None
    scope: Scope = UNSCOPED

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.path.split("."))

    @property
    def depth(self) -> int:
        return self.path.count(".") + 1

    @property
    def is_operation_level(self) -> bool:
        return self.operation is not None

    @property
    def permission(self) -> str:
        """The rule's permission in ``path[:operation]`` notation."""
        return f"{self.path}:{self.operation.value}" if self.operation else self.path
