"""Permission catalog: the read-only lookup of declared permissions.

The catalog answers two questions for the access control core:

    ``definition_for(path)``: kind and scope requirements of a declared path
    ``group_members(name)`` : concrete permissions a group name expands into

It is built once per process (``default_catalog``) and never mutated. Paths
that are not declared remain legal; they inherit their kind from the nearest
declared ancestor and carry no scope requirement of their own.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Union

from pydantic import ValidationError

from ..core.config import Settings, settings
from ..exceptions import CatalogError
from ..models.permission import PermissionDefinition
from ..schemas.catalog import CatalogDocument
from .builtin_permissions import PERMISSION_GROUPS, PERMISSIONS
from .permission_syntax import PERMISSION_PATTERN, ancestors

logger = logging.getLogger(__name__)


def _is_plain_path(name: str) -> bool:
    return bool(PERMISSION_PATTERN.fullmatch(name)) and ":" not in name


class PermissionCatalog:
    """Declared permissions plus permission groups."""

    def __init__(
        self,
        definitions: Iterable[PermissionDefinition],
        groups: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> None:
        declared: dict[str, PermissionDefinition] = {}
        for definition in definitions:
            if not _is_plain_path(definition.name):
                raise CatalogError(f"Invalid permission name: {definition.name!r}")
            if definition.name in declared:
                raise CatalogError(f"Duplicate permission: {definition.name}")
            declared[definition.name] = definition

        expansions: dict[str, tuple[str, ...]] = {}
        for name, members in (groups or {}).items():
            if not _is_plain_path(name):
                raise CatalogError(f"Invalid permission group name: {name!r}")
            if name in declared:
                raise CatalogError(f"Permission group {name} shadows a declared permission")
            members = tuple(members)
            for member in members:
                if not PERMISSION_PATTERN.fullmatch(member):
                    raise CatalogError(f"Invalid member {member!r} in permission group {name}")
            expansions[name] = members

        self._definitions = MappingProxyType(declared)
        self._groups = MappingProxyType(expansions)
        self._check_group_cycles()

    def _check_group_cycles(self) -> None:
        """Reject groups that (indirectly) contain themselves."""
        finished: set[str] = set()

        def visit(name: str, trail: tuple[str, ...]) -> None:
            if name in trail:
                cycle = " -> ".join(trail[trail.index(name):] + (name,))
                raise CatalogError(f"Permission group cycle: {cycle}")
            if name in finished:
                return
            for member in self._groups[name]:
                if member in self._groups:
                    visit(member, trail + (name,))
            finished.add(name)

        for name in self._groups:
            visit(name, ())

    def definition_for(self, path: str) -> Optional[PermissionDefinition]:
        """Return the definition declared for exactly *path*."""
        return self._definitions.get(path)

    def nearest_definition(self, path: str) -> Optional[PermissionDefinition]:
        """Return the definition of *path* or of its closest declared ancestor."""
        for candidate in ancestors(path):
            definition = self._definitions.get(candidate)
            if definition is not None:
                return definition
        return None

    def group_members(self, name: str) -> Optional[tuple[str, ...]]:
        return self._groups.get(name)

    def is_group(self, name: str) -> bool:
        return name in self._groups

    @property
    def definitions(self) -> Mapping[str, PermissionDefinition]:
        return self._definitions

    @property
    def groups(self) -> Mapping[str, tuple[str, ...]]:
        return self._groups

    def __contains__(self, path: object) -> bool:
        return path in self._definitions

    def __iter__(self) -> Iterator[PermissionDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"PermissionCatalog(permissions={len(self._definitions)}, groups={len(self._groups)})"

    @classmethod
    def from_document(cls, document: CatalogDocument) -> "PermissionCatalog":
        return cls(
            (declaration.to_definition(path) for path, declaration in document.permissions.items()),
            document.groups,
        )


def load_catalog(path: Union[str, Path]) -> PermissionCatalog:
    """Load and validate a JSON catalog document.

    Raises:
        CatalogError: If the file cannot be read or does not match the schema.
    """
    source = str(path)
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read permission catalog: {e}", source=source) from e

    try:
        document = CatalogDocument.model_validate_json(raw)
    except ValidationError as e:
        raise CatalogError(
            f"Invalid permission catalog ({e.error_count()} errors): {e}", source=source
        ) from e

    catalog = PermissionCatalog.from_document(document)
    logger.debug(
        "Permission catalog loaded",
        extra={"source": source, "permissions": len(catalog), "groups": len(catalog.groups)},
    )
    return catalog


def builtin_catalog() -> PermissionCatalog:
    return PermissionCatalog(PERMISSIONS, PERMISSION_GROUPS)


def build_catalog(config: Settings) -> PermissionCatalog:
    """Return the catalog selected by *config*: a JSON file or the built-in one."""
    if config.permission_catalog_file:
        return load_catalog(config.permission_catalog_file)
    return builtin_catalog()


# Process-wide catalog, constructed once at import.
default_catalog = build_catalog(settings)
