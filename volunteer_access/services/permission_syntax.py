"""Permission path syntax.

A permission is one or more alphabetic segments joined by dots, optionally
followed by ``:create``, ``:read``, ``:update`` or ``:delete``::

    event.visible
    organisation.accounts:delete
"""

from __future__ import annotations

import re
from typing import Any, Optional

from ..exceptions import InvalidPermissionError
from ..models.permission import Operation

PERMISSION_PATTERN = re.compile(r"^[A-Za-z]+(\.[A-Za-z]+)*(:(create|read|update|delete))?$")


def is_valid_permission(value: Any) -> bool:
    """Return whether *value* is a syntactically valid permission path."""
    return isinstance(value, str) and PERMISSION_PATTERN.fullmatch(value) is not None


def parse_permission(value: Any) -> tuple[str, Optional[Operation]]:
    """Split a permission into its path and optional operation.

    Raises:
        InvalidPermissionError: If *value* is not valid permission syntax.
    """
    if not is_valid_permission(value):
        raise InvalidPermissionError(value)

    path, _, operation = value.partition(":")
    return path, Operation(operation) if operation else None


def ancestors(path: str) -> list[str]:
    """Return *path* and every ancestor, most specific first.

    >>> ancestors("test.boolean.required")
    ['test.boolean.required', 'test.boolean', 'test']
    """
    segments = path.split(".")
    return [".".join(segments[:depth]) for depth in range(len(segments), 0, -1)]


def is_within(path: str, root: str) -> bool:
    """Return whether *path* equals *root* or lies in its subtree."""
    return path == root or path.startswith(root + ".")
