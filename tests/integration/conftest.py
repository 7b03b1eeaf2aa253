"""Fixtures for HTTP integration tests.

The app under test mounts the marketplace routers under ``/api`` with the
same exception handlers the production app installs. The domain context is
pushed by the autouse fixture in the root conftest.
"""

import base64
import time

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api import register_error_handlers, routers
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router, prefix="/api")
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def as_user():
    """Headers identifying the caller the way the external auth service does."""

    def _headers(user_id):
        token = base64.b64encode(f"{user_id}:{int(time.time() * 1000)}".encode()).decode()
        return {"Authorization": f"Bearer {token}"}

    return _headers
