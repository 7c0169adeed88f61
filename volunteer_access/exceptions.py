"""Custom exception hierarchy for volunteer-access."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for access control failures."""

    # Input errors
    INVALID_PERMISSION = "INVALID_PERMISSION"
    INVALID_RULE = "INVALID_RULE"
    INVALID_SCOPE = "INVALID_SCOPE"

    # Caller contract violations
    INVALID_QUERY = "INVALID_QUERY"
    SCOPE_REQUIRED = "SCOPE_REQUIRED"

    # Access decisions
    ACCESS_DENIED = "ACCESS_DENIED"
    ASSIGNMENT_RESTRICTED = "ASSIGNMENT_RESTRICTED"

    # Catalog errors
    INVALID_CATALOG = "INVALID_CATALOG"


class AccessControlException(Exception):
    """
    Base exception for all volunteer-access errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class InvalidPermissionError(AccessControlException):
    """A permission string does not follow the dotted permission syntax."""

    def __init__(self, permission: Any):
        super().__init__(
            f"Invalid permission: {permission!r}",
            ErrorCode.INVALID_PERMISSION,
            status_code=400,
            details={"permission": str(permission)}
        )
        self.permission = permission


class InvalidRuleError(AccessControlException):
    """A grant or revoke entry could not be turned into a rule."""

    def __init__(self, message: str, entry: Any = None):
        details = {"entry": repr(entry)} if entry is not None else {}
        super().__init__(
            message,
            ErrorCode.INVALID_RULE,
            status_code=400,
            details=details
        )


class InvalidScopeError(AccessControlException):
    """A scope carries an empty, misplaced or non-string value."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.INVALID_SCOPE,
            status_code=400,
            details=details
        )


class InvalidQueryError(AccessControlException):
    """The caller passed an operation that does not fit the permission's kind."""

    def __init__(self, message: str, permission: str):
        super().__init__(
            message,
            ErrorCode.INVALID_QUERY,
            status_code=500,
            details={"permission": permission}
        )
        self.permission = permission


class ScopeRequiredError(AccessControlException):
    """
    A scope-requiring permission was queried without the event and/or team.

    This signals a bug in the calling code, never an access decision.
    """

    def __init__(self, permission: str, missing: list[str]):
        super().__init__(
            f"Permission {permission} requires a scope for: {', '.join(missing)}",
            ErrorCode.SCOPE_REQUIRED,
            status_code=500,
            details={"permission": permission, "missing": missing}
        )
        self.permission = permission
        self.missing = missing


class AccessDeniedError(AccessControlException):
    """The principal is not allowed to use the requested permission."""

    def __init__(
        self,
        permission: str,
        operation: Optional[str] = None,
        scope: Optional[Dict[str, Any]] = None,
    ):
        target = f"{permission}:{operation}" if operation else permission
        super().__init__(
            f"Access denied: {target}",
            ErrorCode.ACCESS_DENIED,
            status_code=403,
            details={"permission": permission, "operation": operation, "scope": scope or {}}
        )
        self.permission = permission
        self.operation = operation
        self.scope = scope or {}


class PermissionAssignmentError(AccessControlException):
    """The editing user may not assign a restricted permission."""

    def __init__(self, permission: str):
        super().__init__(
            f'You are not able to assign the "{permission}" permission',
            ErrorCode.ASSIGNMENT_RESTRICTED,
            status_code=403,
            details={"permission": permission}
        )
        self.permission = permission


class CatalogError(AccessControlException):
    """The permission catalog is malformed."""

    def __init__(self, message: str, source: Optional[str] = None):
        details = {"source": source} if source else {}
        super().__init__(
            message,
            ErrorCode.INVALID_CATALOG,
            status_code=500,
            details=details
        )
