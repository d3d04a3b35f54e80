"""
Favorites API Backend: Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the JSON contract of the favorites API.
Why:   Request parsing, camelCase serialization and OpenAPI docs come for free.
How:   Python attributes are snake_case; `to_camel` aliases give the wire
       names the mobile client sends and expects (userId, recipeId, ...).

Design Decision:
    FavoriteCreate declares every field optional. Presence of the required
    fields is checked by FavoriteService so that a missing field yields the
    API's own 400 "Missing required fields" rather than FastAPI's 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for all schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        # Text columns accept JSON numbers too ("servings": 4 is stored as "4")
        coerce_numbers_to_str=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class FavoriteCreate(CamelModel):
    """Body of POST /api/favorites."""

    user_id: Optional[str] = Field(default=None, description="Owning user (required)")
    recipe_id: Optional[int] = Field(default=None, description="Recipe identifier (required)")
    title: Optional[str] = Field(default=None, description="Recipe title (required)")
    image: Optional[str] = Field(default=None, description="Image URL")
    cook_time: Optional[str] = Field(default=None, description="Display cook time, e.g. '45 minutes'")
    servings: Optional[str] = Field(default=None, description="Display servings, e.g. '4'")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class FavoriteResponse(CamelModel):
    """A stored favorite, as returned by create and list."""

    id: int
    user_id: str
    recipe_id: int
    title: str
    image: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[str] = None
    created_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """
    Error body for every 4xx/5xx the API produces.

    Only a human-readable string; internal details stay in the server logs.
    """

    error: str = Field(description="Error description")
