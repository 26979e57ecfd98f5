"""
Note Pad API: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── sample_note_row: Row-like object as returned by RETURNING/SELECT
    ├── engine: In-memory SQLite engine with the notes table created
    ├── session_factory: Factory bound to that engine
    ├── db_session: One session from the factory
    └── test_client: HTTPX AsyncClient against an app wired to session_factory
"""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from notepad.database import Base, create_session_factory
from notepad.models.note import Note  # noqa: F401  (registers the table)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value = MagicMock(**{"one_or_none.return_value": row})
        result = await note_service.get_note(mock_db_session, note_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_note_row():
    """A row exposing the five note columns as attributes."""
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=uuid4(),
        title="Groceries",
        content="Milk, eggs",
        created_at=now,
        updated_at=now,
    )


# ══════════════════════════════════════════════════════════════════════════
# In-memory database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive, otherwise every new
    connection would see an empty database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    ASGITransport does not run the lifespan, so the app uses the injected
    session factory and never opens a PostgreSQL pool.
    """
    from notepad.main import create_app

    app = create_app(session_factory=session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
