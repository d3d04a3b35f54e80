"""
Favorites API Backend: FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   One place for middleware, exception handlers, routes and lifecycle.
How:   create_app(settings, engine) builds the app and stores the injected
       collaborators on `app.state`:
           app.state.settings         immutable Settings
           app.state.engine           AsyncEngine
           app.state.session_factory  per-request AsyncSession factory
           app.state.bootstrap        startup state machine
Who:   `python -m favorites_api` / the `favorites-api` script, or
       `uvicorn favorites_api.main:app`.

Lifecycle:
    Startup:
    1. Configure logging
    2. Run the bootstrap migration step (no-op if the entry point already did)
    3. Abort startup outside production if the schema could not be prepared
    4. Enter LISTENING (starts the keep-alive job in production)

    Shutdown:
    1. Stop the keep-alive job
    2. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from favorites_api import __version__
from favorites_api.bootstrap import Bootstrap
from favorites_api.config import Settings, get_settings
from favorites_api.database import (
    create_engine_from_settings,
    create_session_factory,
    dispose_engine,
)
from favorites_api.exceptions import DatabaseError, ValidationError
from favorites_api.middleware.logging import RequestLoggingMiddleware
from favorites_api.middleware.request_id import RequestIDMiddleware, request_id_var
from favorites_api.routes import favorites, health

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    (the hosting platform collects stdout).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    bootstrap: Bootstrap = app.state.bootstrap

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Favorites API starting up (mode=%s)", bootstrap.mode.value)

    await bootstrap.migrate()
    # Raising here makes uvicorn abandon startup with a failure exit status
    bootstrap.raise_if_aborted()
    bootstrap.mark_listening()

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Favorites API shutting down...")
    await bootstrap.shutdown()
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the API's `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError         → 400 with the validation message
        RequestValidationError  → 400 "Invalid request body"
        DatabaseError           → 500 generic message
        Exception (fallback)    → 500 generic message

    Internal details (driver messages, SQL) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body is not JSON or a field has the wrong type."""
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request body: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    bootstrap: Optional[Bootstrap] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Defaults to the process-wide get_settings()
        engine: Defaults to an engine built from settings.database_url
        bootstrap: Defaults to a Bootstrap over the same engine
    """
    settings = settings or get_settings()
    engine = engine or create_engine_from_settings(settings)

    app = FastAPI(
        title="Recipe Favorites API",
        description="Stores the recipes each user has bookmarked.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.bootstrap = bootstrap or Bootstrap(settings, engine)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(favorites.router)

    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str) -> FastAPI:
    """
    Module-level `app` for `uvicorn favorites_api.main:app`.

    Built on first access, so importing this module (as the entry point and
    the tests do) opens no engine of its own.
    """
    global _app
    if name != "app":
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    if _app is None:
        _app = create_app()
    return _app
