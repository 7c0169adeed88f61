"""Access control services.

Public entry points are re-exported from the ``volunteer_access`` package;
modules here import each other directly to keep import order predictable.
"""
