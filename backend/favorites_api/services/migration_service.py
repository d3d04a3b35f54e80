"""
Favorites API Backend: Startup Migration Runner
================================================

What:  Brings the database schema up to date before the server listens.
Why:   The service is deployed to hosts where nobody runs `alembic upgrade`
       by hand; the process prepares its own schema on every start.
How:   Two stages, each followed by a bounded read of the favorites table:

    ┌──────────────────┐  ok   ┌──────────────┐
    │ alembic upgrade  │──────▶│   APPLIED    │
    │      head        │       └──────────────┘
    └────────┬─────────┘
             │ error
             ▼
    ┌──────────────────┐  ok   ┌──────────────┐
    │ CREATE TABLE IF  │──────▶│  RECOVERED   │
    │   NOT EXISTS     │       └──────────────┘
    └────────┬─────────┘
             │ error
             ▼
    production?  yes → DEGRADED (keep serving)   no → FATAL (abort startup)

No retries, no locking: a single instance runs this once at process start.
The fallback DDL is compiled from the Favorite model for the connected
dialect, so it always matches the table the ORM queries.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import select
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateTable

from favorites_api.config import StartupMode
from favorites_api.models.favorite import Favorite

logger = logging.getLogger(__name__)


class MigrationOutcome(str, enum.Enum):
    APPLIED = "applied"        # migrations ran, table readable
    RECOVERED = "recovered"    # migrations failed, fallback DDL worked
    DEGRADED = "degraded"      # both failed, production keeps serving
    FATAL = "fatal"            # both failed, startup must abort


@dataclass(frozen=True)
class MigrationResult:
    outcome: MigrationOutcome
    error: Optional[BaseException] = None
    fallback_error: Optional[BaseException] = None

    @property
    def schema_ready(self) -> bool:
        return self.outcome in (MigrationOutcome.APPLIED, MigrationOutcome.RECOVERED)


def build_alembic_config(script_location: Path, connection: Optional[Connection] = None) -> Config:
    """
    Alembic config without an .ini file.

    When `connection` is given, env.py runs the migrations on it instead of
    opening its own engine.
    """
    cfg = Config()
    cfg.set_main_option("script_location", str(script_location))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


class MigrationRunner:
    """
    Runs the primary migration and the fallback table creation.

    Args:
        engine: Async engine for the application database
        mode: Decides whether a total failure is DEGRADED or FATAL
        migrations_dir: Alembic script location (env.py + versions/)
    """

    def __init__(self, engine: AsyncEngine, mode: StartupMode, migrations_dir: Path):
        self.engine = engine
        self.mode = mode
        self.migrations_dir = Path(migrations_dir)

    async def run(self) -> MigrationResult:
        logger.info("Running database migrations...")
        logger.info("Migrations folder path: %s", self.migrations_dir)

        try:
            await self._upgrade()
            logger.info("Database migrations completed successfully")
            await self._probe()
            logger.info("Favorites table is accessible")
            return MigrationResult(outcome=MigrationOutcome.APPLIED)
        except Exception as error:
            logger.error("Migration error: %s", str(error), exc_info=True)
            return await self._fallback(error)

    async def _fallback(self, error: BaseException) -> MigrationResult:
        try:
            logger.info("Attempting direct table creation...")
            await self._create_table()
            await self._probe()
            logger.info("Direct table creation successful")
            return MigrationResult(outcome=MigrationOutcome.RECOVERED, error=error)
        except Exception as fallback_error:
            logger.error("Direct table creation also failed: %s", str(fallback_error))

            if self.mode is StartupMode.PRODUCTION:
                logger.warning("Continuing without migrations in production")
                return MigrationResult(
                    outcome=MigrationOutcome.DEGRADED,
                    error=error,
                    fallback_error=fallback_error,
                )
            return MigrationResult(
                outcome=MigrationOutcome.FATAL,
                error=error,
                fallback_error=fallback_error,
            )

    async def _upgrade(self) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(self._upgrade_sync)

    def _upgrade_sync(self, connection: Connection) -> None:
        cfg = build_alembic_config(self.migrations_dir, connection)
        command.upgrade(cfg, "head")

    async def _create_table(self) -> None:
        async with self.engine.begin() as connection:
            await connection.execute(CreateTable(Favorite.__table__, if_not_exists=True))

    async def _probe(self) -> None:
        """Bounded read proving the favorites table exists and is readable."""
        async with self.engine.connect() as connection:
            await connection.execute(select(Favorite.id).limit(1))
