"""Outcome of a permission query."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class AccessResult(str, Enum):
    GRANTED = "granted"
    REVOKED = "revoked"


# Attached to a verdict when a scope-requiring permission is governed by an
# unscoped rule.
GLOBAL_SCOPE = "global"


@dataclass(frozen=True)
class Verdict:
    """Structured answer to ``AccessControl.query``.

    Attributes:
        result: Polarity of the winning rule.
        crud: The winning rule is an operation-level rule for the queried operation.
        expanded: The winning rule sits above the queried node and was inherited.
        global_: The winning rule has no concrete event or team restriction.
        scope: ``"global"`` when the permission requires a scope but the
            winning rule applies everywhere, otherwise ``None``.
    """

    result: AccessResult
    crud: bool
    expanded: bool
    global_: bool
    scope: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.result is AccessResult.GRANTED

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "result": self.result.value,
            "crud": self.crud,
            "expanded": self.expanded,
            "global": self.global_,
        }
        if self.scope is not None:
            payload["scope"] = self.scope
        return payload
