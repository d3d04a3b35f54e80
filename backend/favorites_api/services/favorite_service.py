"""
Favorites API Backend: Favorite Service
========================================

What:  Validation and data access for the favorites table.
Why:   Keeps the route handlers HTTP-only; every operation here is one
       validated request mapped to one SQL statement.
Who:   Called by the favorites routes with a per-request AsyncSession.

Error Handling Strategy:
    Missing or malformed input raises ValidationError before any SQL runs.
    Any failure while talking to the database is logged with its cause, the
    session is rolled back, and a DatabaseError (generic 500) is raised.
"""

import logging
import re
from typing import List

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from favorites_api.exceptions import DatabaseError, ValidationError
from favorites_api.models.favorite import Favorite
from favorites_api.schemas.favorite import FavoriteCreate

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"

# Plain decimal integers only; int() alone would also take "4_2" or non-ASCII digits
_RECIPE_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_recipe_id(raw: str) -> int:
    """Parse a recipe id taken from the URL path."""
    value = raw.strip()
    if not _RECIPE_ID_PATTERN.fullmatch(value):
        raise ValidationError(message="Invalid recipeId", field="recipeId")
    return int(value)


class FavoriteService:
    """
    Stateless business logic for favorites.

    Responsibilities:
        - add_favorite(): presence check + INSERT ... RETURNING
        - list_favorites(): SELECT by user_id
        - remove_favorite(): DELETE by (user_id, recipe_id), idempotent
    """

    async def add_favorite(self, db: AsyncSession, payload: FavoriteCreate) -> Favorite:
        """
        Insert a favorite and return the stored row.

        Required fields are checked for truthiness, so an empty title or a
        recipe id of 0 is rejected just like an absent one.

        Raises:
            ValidationError: userId, recipeId or title missing/falsy (→ 400)
            DatabaseError: the insert failed (→ 500)
        """
        if not payload.user_id or not payload.recipe_id or not payload.title:
            raise ValidationError(message=MISSING_FIELDS_MESSAGE)

        try:
            result = await db.execute(
                insert(Favorite)
                .values(
                    user_id=payload.user_id,
                    recipe_id=payload.recipe_id,
                    title=payload.title,
                    image=payload.image,
                    cook_time=payload.cook_time,
                    servings=payload.servings,
                )
                .returning(Favorite)
            )
            favorite = result.scalar_one()
            await db.commit()
        except Exception as e:
            await self._rollback(db)
            logger.error("Error adding favorite: %s", str(e), exc_info=True)
            raise DatabaseError(
                context={"operation": "add_favorite", "error_type": type(e).__name__},
            )

        logger.info(
            "Favorite %s added: user=%s recipe=%s",
            favorite.id, favorite.user_id, favorite.recipe_id,
        )
        return favorite

    async def list_favorites(self, db: AsyncSession, user_id: str) -> List[Favorite]:
        """
        All favorites whose user_id matches exactly, in storage order.

        Raises:
            DatabaseError: the query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Favorite).where(Favorite.user_id == user_id)
            )
            return list(result.scalars().all())
        except Exception as e:
            await self._rollback(db)
            logger.error("Error fetching the favorites: %s", str(e), exc_info=True)
            raise DatabaseError(
                context={"operation": "list_favorites", "error_type": type(e).__name__},
            )

    async def remove_favorite(self, db: AsyncSession, user_id: str, recipe_id: int) -> int:
        """
        Delete every favorite matching both user_id and recipe_id.

        No existence check: deleting a pair that is not stored succeeds.

        Returns:
            Number of rows removed (0 when nothing matched)

        Raises:
            DatabaseError: the delete failed (→ 500)
        """
        try:
            result = await db.execute(
                delete(Favorite).where(
                    Favorite.user_id == user_id,
                    Favorite.recipe_id == recipe_id,
                )
            )
            await db.commit()
        except Exception as e:
            await self._rollback(db)
            logger.error("Error removing a favorite: %s", str(e), exc_info=True)
            raise DatabaseError(
                context={"operation": "remove_favorite", "error_type": type(e).__name__},
            )

        removed = result.rowcount or 0
        logger.info("Removed %d favorite(s): user=%s recipe=%s", removed, user_id, recipe_id)
        return removed

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except Exception:
            logger.warning("Rollback after failed statement also failed", exc_info=True)


favorite_service = FavoriteService()
