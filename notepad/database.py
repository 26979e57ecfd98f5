"""
Note Pad API: Database Session Management
===========================================

What:  Async SQLAlchemy engine/session-factory construction, the declarative
       Base, and the per-request session dependency.
Why:   Centralizes all database connection logic in one place.
How:   The engine (and with it the connection pool) is built during the
       application lifespan and stored on `app.state`. Each request borrows
       a session from that factory, issues one statement and gives the
       connection back.
Who:   Used by main.py (lifespan), route handlers (Depends) and tests.

No engine exists at module level: tests hand the app a session
factory bound to an in-memory database, production builds one from settings.

Connection Pooling:
    pool_size / max_overflow:  from settings (default 5 + 5)
    pool_pre_ping:             validates connections before use
    pool_recycle:              recycles long-lived connections
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notepad.config import Settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate.
    """
    pass


# ── Engine & Session Factory ──────────────────────────────────────────────
def create_engine(config: Settings) -> AsyncEngine:
    """
    Build the async engine that owns the connection pool.

    SQLite URLs skip the queue-pool arguments, which its pool classes reject.
    """
    kwargs = {
        "pool_pre_ping": config.db_pool_pre_ping,
        # SQL echo only in DEBUG; it is far too noisy otherwise
        "echo": config.log_level == "DEBUG",
    }
    if not config.is_sqlite:
        kwargs.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_recycle=config.db_pool_recycle,
        )
    return create_async_engine(config.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: rows returned by a statement stay readable after
    the service commits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Borrows a session from the factory stored on app.state
        2. Yields it to the route handler (the service commits its own write)
        3. On error: rolls back
        4. Always: closes the session, returning the connection to the pool.
           Closing also discards any open transaction, which covers a
           request cancelled mid-statement.

    Raises:
        Any exception from the handler is re-raised for the global handlers.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection; called on application shutdown."""
    await engine.dispose()
