"""Favorite relationship models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Favorite(BaseModel):
    """(user, listing) pair; existence means favorited."""
    user_id: str = Field(..., description="User ID")
    bakery_id: str = Field(..., description="Listing ID")
    created_at: Optional[str] = None


class FavoriteStateRequest(BaseModel):
    """Body of the idempotent set-favorite call."""
    favorite: bool = Field(..., description="Desired favorite state")


class FavoriteState(BaseModel):
    """Favorite state after a set-favorite call."""
    model_config = ConfigDict(populate_by_name=True)

    bakery_id: str = Field(..., alias="bakeryId")
    favorite: bool
