"""
Pytest configuration and shared fixtures.

The app runs in-process against an in-memory MongoDB (mongomock-motor)
injected through the get_db dependency.
"""

import sys
from pathlib import Path

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

# Add backend/ to sys.path so tests import config, services, routes...
BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    return AsyncMongoMockClient()["ogcs_crm_test"]


@pytest.fixture
def app(db):
    """FastAPI app wired to the in-memory database."""
    from server import create_app
    from database import get_db

    application = create_app()
    application.dependency_overrides[get_db] = lambda: db
    return application


@pytest.fixture
def api(app):
    """Factory for an httpx client bound to the ASGI app (use with `async with`)."""
    def _client():
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        )
    return _client
