"""
Favorites API Backend: Application Package Initializer
=======================================================

What: Marks the `favorites_api` directory as a Python package.
Why:  Enables module imports like `from favorites_api.config import get_settings`.
Who:  Used by uvicorn, Alembic, pytest and the `favorites-api` console script.

Architecture Note:
    The backend keeps the same thin layering for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Favorites, Startup)   │  ← Validation, SQL, migrations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Settings, the engine and the session factory are built once by the
    application factory and handed down explicitly; no layer imports a
    module-level singleton.
"""

__version__ = "1.0.0"
