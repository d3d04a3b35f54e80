"""
Favorites API Backend: Process Entry Point
===========================================

`python -m favorites_api` or the `favorites-api` console script.

Runs the bootstrap migration step before uvicorn binds the port, so a
development process with an unusable database exits with status 1 instead
of ever listening.
"""

import asyncio
import sys

import uvicorn
from fastapi import FastAPI

from favorites_api.bootstrap import ServerState
from favorites_api.config import get_settings
from favorites_api.database import dispose_engine
from favorites_api.main import create_app, setup_logging


async def prepare(app: FastAPI) -> ServerState:
    """Run migrations, then release the pool bound to this short-lived loop."""
    try:
        return await app.state.bootstrap.migrate()
    finally:
        await dispose_engine(app.state.engine)


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    state = asyncio.run(prepare(app))
    if state is ServerState.ABORTED:
        sys.exit(1)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
