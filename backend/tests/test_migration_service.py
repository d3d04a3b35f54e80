"""
Favorites API Backend: Migration Runner Tests
==============================================

What:  Runs the real Alembic revision and the fallback DDL against SQLite.

What we test:
    ✅ Fresh database → APPLIED, revision stamped
    ✅ Re-running on an up-to-date database → APPLIED
    ✅ Broken migration directory, no table yet → RECOVERED, table usable
    ✅ Table already created outside Alembic → RECOVERED
    ✅ Unreachable database → FATAL in development, DEGRADED in production
"""

import pytest
from sqlalchemy import insert, select, text

from favorites_api.config import DEFAULT_MIGRATIONS_DIR, Settings, StartupMode
from favorites_api.database import Base, create_engine_from_settings
from favorites_api.models.favorite import Favorite
from favorites_api.services.migration_service import MigrationOutcome, MigrationRunner


async def insert_and_read(engine):
    async with engine.begin() as conn:
        await conn.execute(insert(Favorite).values(user_id="u1", recipe_id=42, title="Soup"))
    async with engine.connect() as conn:
        rows = (await conn.execute(select(Favorite.user_id, Favorite.created_at))).all()
    return rows


class TestPrimaryMigration:

    @pytest.mark.asyncio
    async def test_fresh_database_is_migrated(self, engine):
        runner = MigrationRunner(engine, StartupMode.DEVELOPMENT, DEFAULT_MIGRATIONS_DIR)

        result = await runner.run()

        assert result.outcome is MigrationOutcome.APPLIED
        assert result.schema_ready
        assert result.error is None
        async with engine.connect() as conn:
            version = (await conn.execute(text("SELECT version_num FROM alembic_version"))).scalar_one()
        assert version == "0001"

    @pytest.mark.asyncio
    async def test_migrated_table_accepts_rows(self, engine):
        await MigrationRunner(engine, StartupMode.DEVELOPMENT, DEFAULT_MIGRATIONS_DIR).run()

        rows = await insert_and_read(engine)

        assert len(rows) == 1
        assert rows[0].user_id == "u1"
        assert rows[0].created_at is not None

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(self, engine):
        runner = MigrationRunner(engine, StartupMode.DEVELOPMENT, DEFAULT_MIGRATIONS_DIR)

        first = await runner.run()
        second = await runner.run()

        assert first.outcome is MigrationOutcome.APPLIED
        assert second.outcome is MigrationOutcome.APPLIED


class TestFallback:

    @pytest.mark.asyncio
    async def test_broken_manifest_falls_back_to_create_table(self, engine, tmp_path):
        runner = MigrationRunner(engine, StartupMode.DEVELOPMENT, tmp_path / "no-migrations-here")

        result = await runner.run()

        assert result.outcome is MigrationOutcome.RECOVERED
        assert result.schema_ready
        assert result.error is not None
        assert len(await insert_and_read(engine)) == 1

    @pytest.mark.asyncio
    async def test_existing_table_is_left_alone(self, engine):
        """create_all ran before Alembic ever did: the revision's CREATE TABLE fails."""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await insert_and_read(engine)

        result = await MigrationRunner(
            engine, StartupMode.DEVELOPMENT, DEFAULT_MIGRATIONS_DIR
        ).run()

        assert result.outcome is MigrationOutcome.RECOVERED
        async with engine.connect() as conn:
            count = len((await conn.execute(select(Favorite.id))).all())
        assert count == 1


class TestTotalFailure:

    @pytest.mark.asyncio
    async def test_development_is_fatal(self, unreachable_database_url):
        engine = create_engine_from_settings(
            Settings(_env_file=None, database_url=unreachable_database_url)
        )
        try:
            result = await MigrationRunner(
                engine, StartupMode.DEVELOPMENT, DEFAULT_MIGRATIONS_DIR
            ).run()
        finally:
            await engine.dispose()

        assert result.outcome is MigrationOutcome.FATAL
        assert not result.schema_ready
        assert result.error is not None
        assert result.fallback_error is not None

    @pytest.mark.asyncio
    async def test_production_degrades(self, unreachable_database_url):
        engine = create_engine_from_settings(
            Settings(_env_file=None, database_url=unreachable_database_url)
        )
        try:
            result = await MigrationRunner(
                engine, StartupMode.PRODUCTION, DEFAULT_MIGRATIONS_DIR
            ).run()
        finally:
            await engine.dispose()

        assert result.outcome is MigrationOutcome.DEGRADED
        assert not result.schema_ready
        assert result.error is not None
