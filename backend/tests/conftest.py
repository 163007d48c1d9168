"""
Keep API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── token_service:   TokenService with the test secret
    ├── database:        real tables in a temporary SQLite file (aiosqlite)
    ├── test_client:     HTTPX AsyncClient bound to a fresh app via ASGITransport
    └── admin_headers:   Authorization header of a registered + logged-in admin
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time: configure the environment BEFORE any
# keep_api import so tests never touch a real database.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="keep_api_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-signing-secret-with-enough-bytes-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps the suite fast
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.get.return_value = note
            result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def token_service():
    from keep_api.security.tokens import TokenService
    return TokenService(secret=TEST_SECRET, ttl_seconds=3600)


@pytest_asyncio.fixture
async def database():
    """
    Creates every table before the test and drops them afterwards.

    The engine is disposed at teardown so the next test (running on its own
    event loop) starts with a fresh connection pool.
    """
    from keep_api.database import Base, create_tables, engine

    await create_tables()
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to a freshly built FastAPI app.

    Usage:
        async def test_notes(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    from keep_api.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def admin_headers(test_client):
    """Registers an admin, logs in, returns the bearer Authorization header."""
    credentials = {"username": "admin", "password": "correct horse battery staple"}
    response = await test_client.post("/register", json=credentials)
    assert response.status_code == 201
    response = await test_client.post("/login", json=credentials)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
