"""Pydantic schemas for input validation."""

from .rule import AccessRuleInput
from .catalog import CatalogDocument, PermissionDeclaration

__all__ = [
    "AccessRuleInput",
    "CatalogDocument",
    "PermissionDeclaration",
]
