"""FastAPI dependencies exposing access control to route handlers.

Public interface:
    ``get_access_control``: returns the AccessControl of the current principal.
                            The host application overrides it with its own
                            principal loader.
    ``require_access``:     dependency factory; checks one permission against
                            the event and team taken from the route's path
                            parameters and raises 403 otherwise.

    @router.get("/events/{event}/teams/{team}/schedules")
    def list_schedules(access: AccessControl = Depends(require_access("event.schedules", "read"))):
        ...
"""

from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request

from ..exceptions import InvalidScopeError
from ..models.permission import Operation
from ..models.rule import Wildcard
from ..services.access_control import AccessControl


def get_access_control() -> AccessControl:
    """Return the AccessControl for the request's principal.

    Loading grants and revokes belongs to the host application, which
    installs its loader through ``app.dependency_overrides``.
    """
    raise NotImplementedError(
        "get_access_control must be overridden through app.dependency_overrides"
    )


def require_access(
    permission: str,
    operation: Optional[str] = None,
    *,
    event_param: str = "event",
    team_param: str = "team",
) -> Callable[..., AccessControl]:
    """Build a dependency requiring *permission* for the route's scope.

    Args:
        permission: Permission the route requires.
        operation: CRUD operation, for ``crud`` permissions.
        event_param: Name of the path parameter holding the event.
        team_param: Name of the path parameter holding the team.

    Returns:
        A dependency returning the principal's AccessControl once the check
        passed. Denials raise ``AccessDeniedError``; path parameters spelling
        a wildcard raise ``InvalidScopeError``.
    """
    if isinstance(operation, Operation):
        operation = operation.value

    def dependency(
        request: Request,
        access: AccessControl = Depends(get_access_control),
    ) -> AccessControl:
        scope: Dict[str, Any] = {}
        for field, param in (("event", event_param), ("team", team_param)):
            if param not in request.path_params:
                continue
            value = request.path_params[param]
            # Route parameters are always concrete identifiers.
            if isinstance(value, str) and value.strip() in Wildcard._value2member_map_:
                raise InvalidScopeError(
                    f"Path parameter {param!r} must name a concrete {field}", field=field
                )
            scope[field] = value

        access.require(permission, operation, scope)
        return access

    return dependency
