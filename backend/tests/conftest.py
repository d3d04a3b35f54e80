"""
Favorites API Backend: Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file database under tmp_path, driven
       through aiosqlite, so the real SQL paths run without a Postgres server.

Fixture Hierarchy:
    settings ──▶ engine ──▶ schema ──▶ session_factory
                   │
                   └──▶ app ──▶ test_client (HTTPX over ASGITransport)
    mock_db_session: AsyncMock session for pure service unit tests
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="favorites_test_"), "import.db"
)
os.environ["NODE_ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from favorites_api.config import Settings
from favorites_api.database import Base, create_engine_from_settings, create_session_factory
from favorites_api.main import create_app


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'favorites.db'}"


@pytest.fixture
def unreachable_database_url(tmp_path):
    """A SQLite path whose parent directory does not exist: every connect fails."""
    return f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'favorites.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(_env_file=None, database_url=database_url, node_env="development")


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine_from_settings(settings)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def schema(engine):
    """Creates the favorites table straight from the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine)


@pytest_asyncio.fixture
async def test_client(app, schema):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run the lifespan, so no migrations run here;
    the `schema` fixture has already created the table.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """Mock AsyncSession for service tests that need no database at all."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def soup_payload():
    return {"userId": "u1", "recipeId": 42, "title": "Soup"}
