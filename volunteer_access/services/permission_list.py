"""Conversion of permission editor payloads into the stored grant format.

The account editor submits a nested mapping keyed by permission segment::

    {"event": {"applications": True, "visible": False},
     "organisation": {"accounts": {"read": True, "update": True}}}

which becomes the comma separated list accepted as grants by
``AccessControl``::

    "event.applications,organisation.accounts:read,organisation.accounts:update"

Some permissions carry assignment restrictions. Those may only be assigned
by users who satisfy the restriction, unless the account already held the
permission before the edit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..exceptions import CatalogError, InvalidPermissionError, PermissionAssignmentError
from ..models.permission import OPERATIONS, ROOT_RESTRICTION
from ..models.rule import ANY_EVENT, ANY_TEAM, Scope
from .catalog import PermissionCatalog
from .permission_syntax import is_valid_permission, is_within, parse_permission

if TYPE_CHECKING:
    from .access_control import AccessControl

# Suffix distinguishing the root of a nested permission from its children.
# Forms submit in declaration order, so "foo" would otherwise collide with
# the "foo" mapping holding its children.
SELF_SUFFIX = ":self"


def to_permission_list(
    data: Mapping[str, Any],
    user_access: AccessControl,
    existing_access: AccessControl,
    *,
    catalog: Optional[PermissionCatalog] = None,
) -> Optional[str]:
    """Convert a nested editor payload into a comma separated permission list.

    Args:
        data: Nested mapping of permission segments to booleans, CRUD
            operation mappings or further nesting.
        user_access: Access of the user making the change.
        existing_access: Access of the account being edited, before the change.
        catalog: Catalog describing the permissions; *user_access*'s catalog
            when omitted.

    Returns:
        The permission list, or None when nothing is granted.

    Raises:
        TypeError: If *data* is not a mapping.
        InvalidPermissionError: If a key produces invalid permission syntax.
        PermissionAssignmentError: If a restricted permission may not be assigned.
    """
    catalog = catalog if catalog is not None else user_access.catalog

    permissions = _collect(data, catalog, prefix="", permissions=[])
    if not permissions:
        return None

    # O(k*n) sweep over every assigned permission and every declaration in
    # its subtree, so restrictions inherited through a parent grant are seen.
    for permission in permissions:
        _verify_restrictions(permission, catalog, user_access, existing_access)

    return ",".join(permissions)


def _collect(
    data: Any,
    catalog: PermissionCatalog,
    prefix: str,
    permissions: list[str],
) -> list[str]:
    if not isinstance(data, Mapping):
        raise TypeError(f"Unexpected input type: {type(data).__name__}")

    for key, value in data.items():
        name = key[: -len(SELF_SUFFIX)] if key.endswith(SELF_SUFFIX) else key
        permission = f"{prefix}{name}"
        if not is_valid_permission(permission):
            raise InvalidPermissionError(permission)

        if isinstance(value, bool):
            if value:
                permissions.append(permission)

        elif isinstance(value, Mapping):
            definition = catalog.definition_for(permission)
            if definition is not None and definition.is_crud:
                operations = [operation for operation in OPERATIONS if value.get(operation.value)]
                if len(operations) == len(OPERATIONS):
                    permissions.append(permission)
                else:
                    permissions.extend(f"{permission}:{operation.value}" for operation in operations)
                continue

            _collect(value, catalog, f"{permission}.", permissions)

    return permissions


def is_restricted(restriction: str, access: AccessControl) -> bool:
    """Return whether *restriction* is in effect for the given *access*."""
    if restriction == ROOT_RESTRICTION:
        return not access.can("root")

    raise CatalogError(f"Unhandled permission restriction: {restriction}")


def _verify_restrictions(
    permission: str,
    catalog: PermissionCatalog,
    user_access: AccessControl,
    existing_access: AccessControl,
) -> None:
    path, operation = parse_permission(permission)

    for definition in catalog:
        if definition.restrict is None or not is_within(definition.name, path):
            continue

        if isinstance(definition.restrict, str):
            _validate_restriction(permission, definition.restrict, catalog, user_access, existing_access)
            continue

        for restricted_operation in OPERATIONS:
            restriction = definition.restrict.get(restricted_operation)
            if restriction is None:
                continue
            if operation is not None and operation is not restricted_operation:
                continue

            _validate_restriction(
                f"{definition.name}:{restricted_operation.value}",
                restriction, catalog, user_access, existing_access,
            )


def _validate_restriction(
    permission: str,
    restriction: str,
    catalog: PermissionCatalog,
    user_access: AccessControl,
    existing_access: AccessControl,
) -> None:
    """Raise unless *restriction* is lifted or *permission* was already held."""
    if not is_restricted(restriction, user_access):
        return

    if _already_granted(permission, catalog, existing_access):
        return

    raise PermissionAssignmentError(permission)


def _already_granted(permission: str, catalog: PermissionCatalog, access: AccessControl) -> bool:
    path, operation = parse_permission(permission)

    # Scope-requiring permissions count as held when held anywhere.
    definition = catalog.definition_for(path)
    scope = Scope(
        event=ANY_EVENT if definition is not None and definition.requires_event else None,
        team=ANY_TEAM if definition is not None and definition.requires_team else None,
    )

    nearest = catalog.nearest_definition(path)
    if operation is None and nearest is not None and nearest.is_crud:
        return all(access.can(path, candidate, scope) for candidate in OPERATIONS)

    return access.can(path, operation, scope)


__all__ = ["SELF_SUFFIX", "is_restricted", "to_permission_list"]
