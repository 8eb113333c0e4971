"""
Shared pytest fixtures for the Systems Hub test suite.

Provides:
    - app: Flask application (session-scoped)
    - _clean_hub: Per-test reset of the app's SolutionsHub (autouse)
    - hub: The app's SolutionsHub, empty at the start of each test
    - client: Flask test client (function-scoped)
    - sources_payload: camelCase client/project records as the front end sends them
    - loaded_hub: The app hub with sources_payload already loaded
"""

import copy

import pytest

from systems_hub import create_app
from systems_hub.blueprints import HUB_EXTENSION


# ── Sample source records ────────────────────────────────────────────────

SOURCES = {
    "clients": [
        {
            "id": "c1",
            "companyName": "Acme Corp",
            "industry": "retail",
            "status": "active",
            "teamMemberIds": ["u1", "u2", "u3"],
            "tools": [
                {"id": "t1", "name": "Invoice Bot", "type": "Automation",
                 "status": "active", "usage": 82, "lastUsed": "2024-03-01T09:00:00Z"},
                {"id": "t2", "name": "Helpdesk Assistant", "type": "AI Assistant",
                 "status": "paused", "usage": 0, "lastUsed": "2024-02-11T09:00:00Z"},
            ],
            "templates": [],
            "library": [],
            "createdAt": "2024-01-10T08:00:00Z",
            "updatedAt": "2024-03-05T10:00:00Z",
        },
        {
            "id": "c2",
            "companyName": "Globex",
            "industry": "finance",
            "status": "active",
            "teamMemberIds": ["u7"],
            "tools": [
                {"id": "t3", "name": "Expense Tracker", "type": "Financial Tool",
                 "status": "development", "usage": 64, "lastUsed": "2024-03-02T09:00:00Z"},
            ],
            "createdAt": "2024-01-12T08:00:00Z",
            "updatedAt": "2024-03-06T10:00:00Z",
        },
    ],
    "projects": [
        {
            "id": "p1",
            "name": "Acme Rollout",
            "description": "Back-office automation",
            "status": "active",
            "clientId": "c1",
            "assignedUsers": ["u1", "u2"],
            "systems": [
                {"id": "s1", "name": "Order Router", "description": "Routes orders",
                 "type": "workflow", "status": "testing",
                 "businessImpact": "Cuts order latency", "projectId": "p1",
                 "createdAt": "2024-02-01T08:00:00Z"},
                {"id": "s2", "name": "invoice bot ", "description": "Duplicate by name",
                 "type": "automation", "status": "active", "projectId": "p1",
                 "createdAt": "2024-02-02T08:00:00Z"},
            ],
            "createdAt": "2024-01-20T08:00:00Z",
            "updatedAt": "2024-03-07T10:00:00Z",
        },
        {
            "id": "p2",
            "name": "Orphan Project",
            "status": "active",
            "clientId": "missing-client",
            "assignedUsers": [],
            "systems": [
                {"id": "s-3", "name": "Data Bridge", "type": "integration",
                 "status": "retired", "projectId": "p2",
                 "createdAt": "2024-02-03T08:00:00Z"},
            ],
            "createdAt": "2024-01-21T08:00:00Z",
            "updatedAt": "2024-03-08T10:00:00Z",
        },
    ],
}


# ── App fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(autouse=True)
def _clean_hub(app):
    """Per-test: start and finish with an empty hub."""
    app.extensions[HUB_EXTENSION].reset()
    yield
    app.extensions[HUB_EXTENSION].reset()


@pytest.fixture()
def hub(app):
    return app.extensions[HUB_EXTENSION]


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def sources_payload():
    """A fresh deep copy, so tests can mutate it freely."""
    return copy.deepcopy(SOURCES)


@pytest.fixture()
def loaded_hub(hub, sources_payload):
    hub.replace_sources(sources_payload)
    return hub
