"""Permission catalog document schemas.

A catalog document is the JSON form of the permission catalog::

    {
      "permissions": {
        "event.visible": {"type": "boolean", "requireEvent": true, "requireTeam": true},
        "organisation.accounts": {"type": "crud", "restrict": {"delete": "root"}}
      },
      "groups": {"staff": ["event.visible"]}
    }
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Union

from ..models.permission import Operation, PermissionDefinition, PermissionKind


class PermissionDeclaration(BaseModel):
    """One entry of the ``permissions`` table."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: Literal["boolean", "crud"] = "boolean"
    name: str = ""
    description: str = ""
    require_event: bool = Field(default=False, alias="requireEvent")
    require_team: bool = Field(default=False, alias="requireTeam")
    restrict: Optional[Union[Literal["root"], Dict[Operation, Literal["root"]]]] = None

    def to_definition(self, path: str) -> PermissionDefinition:
        return PermissionDefinition(
            name=path,
            kind=PermissionKind(self.type),
            requires_event=self.require_event,
            requires_team=self.require_team,
            title=self.name,
            description=self.description,
            restrict=dict(self.restrict) if isinstance(self.restrict, dict) else self.restrict,
        )


class CatalogDocument(BaseModel):
    """Top-level catalog file."""

    model_config = ConfigDict(extra="forbid")

    permissions: Dict[str, PermissionDeclaration] = Field(default_factory=dict)
    groups: Dict[str, List[str]] = Field(default_factory=dict)
