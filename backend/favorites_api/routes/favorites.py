"""
Favorites API Backend: Favorites Route Handlers
================================================

What:  POST /api/favorites, GET /api/favorites/{user_id},
       DELETE /api/favorites/{user_id}/{recipe_id}.
How:   Each handler takes a per-request session, delegates to FavoriteService
       and shapes the response. Errors are raised as ValidationError /
       DatabaseError and turned into JSON by the handlers in main.py.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from favorites_api.database import get_db_session
from favorites_api.schemas.favorite import (
    ErrorResponse,
    FavoriteCreate,
    FavoriteResponse,
    MessageResponse,
)
from favorites_api.services.favorite_service import favorite_service, parse_recipe_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Favorites"])


@router.post(
    "/favorites",
    status_code=201,
    response_model=FavoriteResponse,
    responses={
        400: {"description": "Missing required fields", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Save a recipe to a user's favorites",
)
async def add_favorite(
    payload: FavoriteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteResponse:
    favorite = await favorite_service.add_favorite(db, payload)
    return FavoriteResponse.model_validate(favorite)


@router.get(
    "/favorites/{user_id}",
    response_model=List[FavoriteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List a user's favorites",
)
async def list_favorites(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[FavoriteResponse]:
    favorites = await favorite_service.list_favorites(db, user_id)
    return [FavoriteResponse.model_validate(favorite) for favorite in favorites]


@router.delete(
    "/favorites/{user_id}/{recipe_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "recipeId is not an integer", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Remove a recipe from a user's favorites",
    description="Idempotent: succeeds even when the favorite does not exist.",
)
async def remove_favorite(
    user_id: str,
    recipe_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await favorite_service.remove_favorite(db, user_id, parse_recipe_id(recipe_id))
    return MessageResponse(message="Favorite removed successfully")
