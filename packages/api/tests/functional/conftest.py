# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

Requests go through the real app (routing, RBAC, error handlers) over
ASGI, backed by the per-test SQLite database. ``_clean_overrides`` clears
dependency overrides after every test so one persona never leaks into the
next.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from rekro_db import get_db, get_db_service

from rekro_api.main import app as real_app
from rekro_api.middleware.auth import get_current_user
from rekro_api.schemas.auth import UserContext


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    return real_app


@pytest.fixture
def db_health():
    """Stand-in DatabaseService for the health endpoint."""
    service = MagicMock()
    service.health_check = AsyncMock(return_value=True)
    return service


@pytest.fixture
def client_factory(app, session_factory, db_health):
    """Factory fixture: configure a persona and return an AsyncClient.

    Each request gets its own session from the test engine, as it would
    from the production session factory.
    """

    async def _get_db():
        async with session_factory() as session:
            yield session

    def _make(user: UserContext | None) -> httpx.AsyncClient:
        app.dependency_overrides[get_db] = _get_db
        app.dependency_overrides[get_db_service] = lambda: db_health
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        else:
            app.dependency_overrides.pop(get_current_user, None)
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        )

    return _make
