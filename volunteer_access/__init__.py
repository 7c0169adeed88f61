"""Hierarchical, scope-aware permission evaluation for the volunteer manager."""

from .exceptions import (
    AccessControlException,
    AccessDeniedError,
    CatalogError,
    ErrorCode,
    InvalidPermissionError,
    InvalidQueryError,
    InvalidRuleError,
    InvalidScopeError,
    PermissionAssignmentError,
    ScopeRequiredError,
)
from .models import ANY_EVENT, ANY_TEAM, AccessResult, Operation, Scope, Verdict
from .services.permission_syntax import is_valid_permission
from .services.catalog import PermissionCatalog, default_catalog
from .services.access_control import AccessControl
from .services.permission_list import to_permission_list

__version__ = "1.0.0"

__all__ = [
    "AccessControl",
    "ANY_EVENT",
    "ANY_TEAM",
    "Scope",
    "Verdict",
    "AccessResult",
    "Operation",
    "is_valid_permission",
    "PermissionCatalog",
    "default_catalog",
    "to_permission_list",
    "AccessControlException",
    "AccessDeniedError",
    "CatalogError",
    "ErrorCode",
    "InvalidPermissionError",
    "InvalidQueryError",
    "InvalidRuleError",
    "InvalidScopeError",
    "PermissionAssignmentError",
    "ScopeRequiredError",
]
