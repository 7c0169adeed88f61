"""Grant/revoke record schema."""

from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional

from ..models.rule import Wildcard
from ..services.permission_syntax import is_valid_permission


class AccessRuleInput(BaseModel):
    """A scoped grant or revoke as supplied by the role assembly code.

    ``permission`` may name a permission path (optionally with an operation
    suffix) or a permission group. Omitted ``event``/``team`` fields leave
    the rule unrestricted on that dimension. The wildcards ``ANY_EVENT`` and
    ``ANY_TEAM`` are accepted as values, as is their textual form.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"permission": "event.applications", "event": "2025", "team": "crew"},
                {"permission": "senior", "event": "2024"},
            ]
        },
    )

    permission: str
    event: Optional[str] = None
    team: Optional[str] = None

    @field_validator('permission')
    @classmethod
    def validate_permission(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_permission(v):
            raise ValueError(f"Invalid permission syntax: {v!r}")
        return v

    @field_validator('event', 'team')
    @classmethod
    def validate_scope_value(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Scope values must not be empty")
        # Records are built by the role assembly code, so the textual
        # wildcard form is accepted here and nowhere else.
        return Wildcard.from_text(v.strip())
