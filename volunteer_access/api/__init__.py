"""FastAPI integration."""

from .dependencies import get_access_control, require_access

__all__ = [
    "get_access_control",
    "require_access",
]
