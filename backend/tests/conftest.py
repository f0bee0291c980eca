"""
DogAdopt Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock async session (no real DB needed)
    ├── test_settings:   Settings tuned for tests (fast limits, test secret)
    ├── database:        Fresh in-memory SQLite Database with tables created
    ├── test_client:     HTTPX AsyncClient bound to an app built on `database`
    ├── register_user:   Registers a user through the API, returns id + headers
    └── create_dog:      Registers a dog through the API, returns its JSON
"""

import os

# Must happen before any app import: app.config builds its settings at import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import Database  # noqa: E402
from app.main import create_app  # noqa: E402

TEST_JWT_SECRET = os.environ["JWT_SECRET"]
DEFAULT_PASSWORD = "password123"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            mock_db_session.get.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_JWT_SECRET,
        environment="test",
        log_level="WARNING",
        rate_limit_requests=10000,
    )


@pytest_asyncio.fixture
async def database():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive; an in-memory database
    disappears with its connection.
    """
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(settings=test_settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Factory: register `username` and return {id, username, token, headers}."""

    async def _register(username: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = await test_client.post(
            "/api/auth/register", json={"username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "username": data["user"]["username"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _register


@pytest.fixture
def create_dog(test_client):
    """Factory: register a dog as `user` and return the dog's JSON."""

    async def _create(user: dict, name: str, description: str = "A very good dog") -> dict:
        response = await test_client.post(
            "/api/dogs",
            json={"name": name, "description": description},
            headers=user["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
