"""
Favorites API Backend: Favorite SQLAlchemy Model
=================================================

What:  ORM model for the `favorites` table (a user's bookmarked recipes).
Why:   Single table definition shared by the favorites service, the Alembic
       revision and the fallback CREATE TABLE IF NOT EXISTS at startup.
Who:   FavoriteService (insert/select/delete) and MigrationRunner (DDL, probe).

Table Design Rationale:
    - id: auto-increment integer (SERIAL on PostgreSQL), never reused
    - user_id: opaque text; not checked against any user registry
    - recipe_id: integer id of the recipe in the upstream recipe catalogue
    - title/image/cook_time/servings: denormalized display fields so listing
      favorites needs no call to the catalogue
    - created_at: set by the database at insert time

    No unique constraint on (user_id, recipe_id): saving the same recipe
    twice yields two rows, and deleting the pair removes both.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from favorites_api.database import Base


class Favorite(Base):
    """
    A recipe bookmarked by a user.

    Lifecycle:
        1. Created by POST /api/favorites
        2. Read by GET /api/favorites/{userId}
        3. Deleted by DELETE /api/favorites/{userId}/{recipeId}
        Rows are never updated in place.
    """

    __tablename__ = "favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    recipe_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cook_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    servings: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=False),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return (
            f"<Favorite(id={self.id}, user_id='{self.user_id}', "
            f"recipe_id={self.recipe_id})>"
        )
