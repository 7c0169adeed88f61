"""Exception handler translating access control errors into JSON responses."""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from ..exceptions import AccessControlException

logger = logging.getLogger(__name__)


async def access_exception_handler(request: Request, exc: AccessControlException) -> JSONResponse:
    """
    Handle access control exceptions and return structured JSON responses.

    Denials are expected traffic and logged as warnings; everything else
    points at a bug or broken configuration and is logged as an error.

    Args:
        request: FastAPI request object
        exc: AccessControlException instance

    Returns:
        JSONResponse with error details
    """
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        f"AccessControlException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install ``access_exception_handler`` for the whole exception hierarchy."""
    app.add_exception_handler(AccessControlException, access_exception_handler)
