"""
MarkNote — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked DB, real SQLite DB, HTTP client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db_engine: Async engine on a throwaway SQLite file, schema created
    ├── db_session: Session bound to db_engine
    ├── test_client: HTTPX AsyncClient wired to the app and db_engine
    └── create_note: Helper that posts the new-note form
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any marknote imports: the settings
# singleton and the module-level engine are built at import time.
_TEST_DIR = tempfile.mkdtemp(prefix="marknote_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marknote.database import Base, build_engine, get_db_session
from marknote.models.note import Note  # noqa: F401  (registers the table)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Failure paths (driver errors) are easier to force on a mock.
    How:     Mocks execute, flush, commit, rollback, delete and close.

    Usage:
        async def test_list_fails(mock_db_session):
            mock_db_session.execute.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Provides an async engine on a fresh SQLite file with the schema created.

    Each test gets its own file, so tests never see each other's notes.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Provides a session on db_engine for service-level tests."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app, and
             overrides get_db_session so every request commits to db_engine.
             Cookies persist across requests, so flash notices survive the
             redirect like they do in a browser.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    from marknote.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def create_note(test_client):
    """
    Returns a coroutine that submits the new-note form.

    Usage:
        note_path = await create_note("Title", "Body")   # "/notes/<uuid>"
    """
    async def _create(title="My Test Note", content="# Hello\n\nSome **bold** text", **extra):
        response = await test_client.post(
            "/notes", data={"title": title, "content": content, **extra}
        )
        assert response.status_code == 302, response.text
        return response.headers["location"]

    return _create
