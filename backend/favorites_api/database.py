"""
Favorites API Backend: Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `create_engine_from_settings()` builds the pooled async engine once;
       the app factory stores the session factory on `app.state`, and
       `get_db_session` hands each request its own session.
Who:   The app factory, the migration runner and route handlers.

Connection Pooling Strategy:
    pool_size=5:       Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use (hosted Postgres
                       providers close idle connections aggressively)
    pool_recycle=1800: Recycles connections every 30 minutes

    SQLite URLs (used by the test suite) skip the pool sizing arguments.
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

from favorites_api.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Its metadata is what Alembic's env.py targets and what the fallback
    table creation reads its DDL from.
    """
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine described by `settings.database_url`."""
    options = {"echo": settings.log_level == "DEBUG"}
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=1800,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned ORM objects stay readable after commit,
    # which the create endpoint relies on to serialize the inserted row
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    What:    Opens a session from the factory stored on `app.state`.
    Who:     Injected into route handlers via Depends().

    Services commit their own single statement; this dependency only rolls
    back whatever is left open when an exception escapes, and always closes
    the session so the connection returns to the pool.
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


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Application shutdown, and after the pre-listen migration run.
    """
    await engine.dispose()
