"""
Favorites API Backend: Server Bootstrap
========================================

What:  The startup state machine: migrate the schema, then listen.
Why:   Production must keep serving even when the schema step fails, while
       a developer wants the process to stop loudly. Making that decision
       an explicit StartupMode on an explicit object keeps it testable.

States:
    STARTING → MIGRATING → MIGRATED ─────────┐
                         → MIGRATION_FAILED ─┴→ LISTENING
                         → ABORTED  (non-production, process exits 1)

LISTENING is terminal for the life of the process.
"""

import enum
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from favorites_api.config import Settings, StartupMode
from favorites_api.exceptions import MigrationError
from favorites_api.services.keepalive import KeepAliveJob
from favorites_api.services.migration_service import (
    MigrationOutcome,
    MigrationResult,
    MigrationRunner,
)

logger = logging.getLogger(__name__)


class ServerState(str, enum.Enum):
    STARTING = "starting"
    MIGRATING = "migrating"
    MIGRATED = "migrated"
    MIGRATION_FAILED = "migration_failed"
    LISTENING = "listening"
    ABORTED = "aborted"


class Bootstrap:
    """
    Drives startup for one process.

    Args:
        settings: Application settings (port, startup mode, keep-alive target)
        engine: Engine the migration runner works against
        runner: Override the migration runner (tests)
        job: Override the keep-alive job (tests); by default one is built in
             production when API_URL is set
    """

    def __init__(
        self,
        settings: Settings,
        engine: AsyncEngine,
        runner: Optional[MigrationRunner] = None,
        job: Optional[KeepAliveJob] = None,
    ):
        self.settings = settings
        self.mode: StartupMode = settings.startup_mode
        self.runner = runner or MigrationRunner(engine, self.mode, settings.migrations_dir)
        self.job = job if job is not None else self._build_job()
        self.state = ServerState.STARTING
        self.migration_result: Optional[MigrationResult] = None

    def _build_job(self) -> Optional[KeepAliveJob]:
        if self.mode is not StartupMode.PRODUCTION or not self.settings.api_url:
            return None
        return KeepAliveJob(self.settings.api_url, self.settings.keepalive_interval)

    async def migrate(self) -> ServerState:
        """
        Run the migration step once.

        Later calls return the current state without touching the database,
        so the lifespan hook can call this even after the entry point did.
        """
        if self.state is not ServerState.STARTING:
            return self.state

        self.state = ServerState.MIGRATING
        result = await self.runner.run()
        self.migration_result = result

        if result.schema_ready:
            self.state = ServerState.MIGRATED
        elif result.outcome is MigrationOutcome.DEGRADED:
            self.state = ServerState.MIGRATION_FAILED
            logger.warning("Starting server despite migration issues...")
        else:
            self.state = ServerState.ABORTED
            logger.error("Failed to start server: %s", result.error)
        return self.state

    def raise_if_aborted(self) -> None:
        if self.state is ServerState.ABORTED:
            original = self.migration_result.error if self.migration_result else None
            raise MigrationError(original=original)

    def mark_listening(self) -> None:
        """Enter LISTENING and start the production keep-alive job."""
        if self.state not in (ServerState.MIGRATED, ServerState.MIGRATION_FAILED):
            raise RuntimeError(f"Cannot start listening from state {self.state.value}")

        if self.state is ServerState.MIGRATION_FAILED:
            logger.warning(
                "Server is running on PORT: %d (with migration warnings)", self.settings.port
            )
        else:
            logger.info("Server is running on PORT: %d", self.settings.port)
        self.state = ServerState.LISTENING

        if self.mode is StartupMode.PRODUCTION:
            if self.job is None:
                logger.warning("API_URL is not set; keep-alive job disabled")
            else:
                self.job.start()

    async def shutdown(self) -> None:
        if self.job is not None:
            await self.job.stop()
