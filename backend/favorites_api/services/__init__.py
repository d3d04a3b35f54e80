# Services package init
"""
Favorites API Backend: Services Layer
======================================

Service Inventory:
    - FavoriteService: presence validation + one SQL statement per operation
    - MigrationRunner: Alembic upgrade with fallback CREATE TABLE IF NOT EXISTS
    - KeepAliveJob: production-only periodic self-ping
"""
