"""Permission metadata as declared by the permission catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union


class Operation(str, Enum):
    """CRUD facet of a ``crud``-shaped permission."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


OPERATIONS: tuple[Operation, ...] = (
    Operation.CREATE,
    Operation.READ,
    Operation.UPDATE,
    Operation.DELETE,
)


class PermissionKind(str, Enum):
    """Shape of a permission: a plain switch or four CRUD switches."""

    BOOLEAN = "boolean"
    CRUD = "crud"


# The only restriction understood today: assigning requires the root permission.
ROOT_RESTRICTION = "root"

Restriction = Union[str, Mapping[Operation, str]]


@dataclass(frozen=True)
class PermissionDefinition:
    """Describes one declared permission path.

    ``restrict`` is either a restriction applying to the permission as a
    whole or a mapping of operation to restriction for CRUD permissions.
    """

    name: str
    kind: PermissionKind = PermissionKind.BOOLEAN
    requires_event: bool = False
    requires_team: bool = False
    title: str = ""
    description: str = ""
    restrict: Optional[Restriction] = None

    @property
    def requires_scope(self) -> bool:
        return self.requires_event or self.requires_team

    @property
    def is_crud(self) -> bool:
        return self.kind is PermissionKind.CRUD
