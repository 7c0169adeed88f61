"""Immutable domain types shared by the access control services."""

from .permission import (
    OPERATIONS,
    ROOT_RESTRICTION,
    Operation,
    PermissionDefinition,
    PermissionKind,
)
from .rule import ANY_EVENT, ANY_TEAM, UNSCOPED, Polarity, Rule, Scope, Wildcard
from .verdict import GLOBAL_SCOPE, AccessResult, Verdict

__all__ = [
    "OPERATIONS",
    "ROOT_RESTRICTION",
    "Operation",
    "PermissionDefinition",
    "PermissionKind",
    "ANY_EVENT",
    "ANY_TEAM",
    "UNSCOPED",
    "Polarity",
    "Rule",
    "Scope",
    "Wildcard",
    "GLOBAL_SCOPE",
    "AccessResult",
    "Verdict",
]
