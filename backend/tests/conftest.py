"""
TIL Backend — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── session_factory: Fresh SQLite file + engine + schema, disposed after the test
    │   ├── db_session: One AsyncSession for service-level tests
    │   └── application: Fresh FastAPI app bound to that database
    │       └── test_client: HTTPX AsyncClient over ASGITransport
    │           └── auth_user: Registered user plus a bearer Authorization header
    └── acronym_payload: Factory for acronym request bodies
"""

import os

# Override settings for testing BEFORE any app imports.
# app.config builds its Settings singleton at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"  # PBKDF2 minimum; keeps tests fast

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.database import Base, build_engine, build_session_factory, get_db_session  # noqa: E402
import app.models  # noqa: E402,F401  (registers every table on Base.metadata)


# ══════════════════════════════════════════════════════════════════════════
# Mocked Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    How:     Mocks execute, get, flush, commit, rollback, and close methods.

    Usage:
        async def test_db_failure(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError("x", {}, Exception())
            with pytest.raises(DatabaseError):
                await search_service.list_all(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Provides a session factory bound to a brand-new SQLite database.

    What:    One database file per test under pytest's tmp_path.
    How:     Creates the schema from Base.metadata, yields the factory,
             then disposes the engine so no connection outlives the test.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'til_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A single session for calling services directly. Never committed."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def application(session_factory):
    """
    A fresh FastAPI app whose get_db_session uses this test's database.

    The override keeps the commit-on-success / rollback-on-error contract.
    Tests may replace the override to inject failures.
    """
    from app.main import create_app

    fastapi_app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            else:
                await session.commit()

    fastapi_app.dependency_overrides[get_db_session] = override_get_db_session
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(application):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to `application`.
    How:     Uses ASGITransport to route requests directly to the app;
             no server and no lifespan run.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def auth_user(test_client):
    """
    Registers a user and logs in through the API.

    Returns:
        {"id", "username", "password", "headers"} where headers carries
        `Authorization: Bearer <token>` for mutating requests.
    """
    password = "password"
    created = await test_client.post(
        "/api/users/",
        json={"name": "Alice", "username": "alicia", "password": password},
    )
    assert created.status_code == 201

    login = await test_client.post("/api/users/login", auth=("alicia", password))
    assert login.status_code == 200

    return {
        "id": created.json()["id"],
        "username": "alicia",
        "password": password,
        "headers": {"Authorization": f"Bearer {login.json()['token']}"},
    }


@pytest.fixture
def acronym_payload():
    """Factory for acronym request bodies in wire format (`userID`)."""
    def _build(user_id: str, short: str = "OMG", long: str = "Oh My God") -> dict:
        return {"short": short, "long": long, "userID": user_id}
    return _build
