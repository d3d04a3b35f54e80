# Routes package init
"""
Favorites API Backend: API Routes Package
==========================================

Route Inventory:
    - health.py:     GET    /api/health
    - favorites.py:  POST   /api/favorites
                     GET    /api/favorites/{user_id}
                     DELETE /api/favorites/{user_id}/{recipe_id}

Routes stay thin: extract request data, call FavoriteService, shape the
response. Validation and SQL live in the service.
"""
