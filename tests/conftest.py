"""Shared test fixtures for the volunteer-access test suite.

The access control core is pure and needs no setup; fixtures here build
catalogs, catalog files, and the small FastAPI application used by the
integration tests.
"""

import json
import logging
import os

# Keep test output readable regardless of the developer's environment.
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from volunteer_access import AccessControl
from volunteer_access.api import get_access_control, require_access
from volunteer_access.middleware.exception_handler import register_exception_handlers
from volunteer_access.models import PermissionDefinition, PermissionKind
from volunteer_access.services.catalog import PermissionCatalog


@pytest.fixture()
def small_catalog() -> PermissionCatalog:
    """Catalog with one permission of each shape, independent of the built-ins."""
    return PermissionCatalog(
        [
            PermissionDefinition(name="shifts", kind=PermissionKind.CRUD, requires_event=True),
            PermissionDefinition(name="shifts.swap"),
            PermissionDefinition(name="rota", requires_team=True),
            PermissionDefinition(name="admin", restrict="root"),
            PermissionDefinition(name="root"),
        ],
        {"planner": ["shifts", "rota"], "lead": ["planner", "shifts.swap"]},
    )


@pytest.fixture()
def catalog_file(tmp_path):
    """Factory writing a catalog document to disk and returning its path."""

    def _write(document, name: str = "catalog.json"):
        path = tmp_path / name
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def restore_logging():
    """Restore root logger handlers and level after tests that call setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def app() -> FastAPI:
    """Minimal application guarding a few routes with ``require_access``."""
    application = FastAPI()
    register_exception_handlers(application)

    @application.get("/statistics")
    def statistics(access: AccessControl = Depends(require_access("statistics.basic"))):
        return {"grants": len(access.grants)}

    @application.get("/events/{event}/teams/{team}/schedules")
    def schedules(
        event: str,
        team: str,
        access: AccessControl = Depends(require_access("event.schedules", "read")),
    ):
        return {"event": event, "team": team}

    @application.get("/festivals/{slug}/settings")
    def festival_settings(
        slug: str,
        access: AccessControl = Depends(require_access("event.settings", event_param="slug")),
    ):
        return {"event": slug}

    @application.get("/events/{event}/visible")
    def visible(event: str, access: AccessControl = Depends(require_access("event.visible"))):
        return {"event": event}

    return application


@pytest.fixture()
def client_for(app):
    """Factory returning a TestClient whose principal has the given access."""
    clients = []

    def _client(access: AccessControl) -> TestClient:
        app.dependency_overrides[get_access_control] = lambda: access
        client = TestClient(app, raise_server_exceptions=False)
        clients.append(client)
        return client

    yield _client
    for client in clients:
        client.close()
    app.dependency_overrides.clear()
