"""Listing models (the ``bakeries`` table)."""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ListingStatus(str, Enum):
    """Listing status values."""
    OPEN = "open"
    CLOSED = "closed"
    TEMPORARILY_CLOSED = "temporarily_closed"


# Columns owned by the backend or fixed at creation; never taken from a patch
PROTECTED_FIELDS = frozenset({"id", "created_by", "created_at", "rating"})


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Listing(BaseModel):
    """A directory entry as stored in the managed backend."""
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str = Field(..., description="Listing ID (opaque)")
    name: str = Field(..., description="Display name")
    city: str = Field(..., description="City")
    specialties: Optional[str] = Field(None, description="Free-text specialties")
    average_price: Optional[float] = Field(None, description="Average price")
    opening_hours: Optional[str] = Field(None, description="Opening hours")
    status: str = Field(default=ListingStatus.OPEN.value, description="open, closed, temporarily_closed")
    image_url: Optional[str] = Field(None, description="Card image URL")
    created_by: Optional[str] = Field(None, description="Creator user ID (immutable)")
    rating: Optional[float] = Field(None, description="Aggregate rating")
    created_at: Optional[str] = None

    @field_validator("id", "created_by", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class ListingCreate(BaseModel):
    """Client payload for creating a listing.

    Has no ``created_by``: the creator always comes from the verified bearer
    credential. Unknown keys are dropped.
    """
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    name: Optional[str] = None
    city: Optional[str] = None
    specialties: Optional[str] = None
    average_price: Optional[float] = None
    opening_hours: Optional[str] = None
    status: Optional[ListingStatus] = None
    image_url: Optional[str] = None

    @field_validator(
        "name", "city", "specialties", "average_price", "opening_hours", "status", "image_url",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def missing_required(self) -> list[str]:
        """Names of required fields that are missing or blank."""
        return [f for f in ("name", "city") if not getattr(self, f)]

    def to_row(self, actor_id: str) -> dict:
        """Row to insert for ``actor_id``."""
        row = self.model_dump(exclude_none=True)
        row["status"] = row.get("status") or ListingStatus.OPEN.value
        row["created_by"] = actor_id
        return row


class ListingUpdate(BaseModel):
    """Partial patch; only fields present in the request are applied."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    name: Optional[str] = None
    city: Optional[str] = None
    specialties: Optional[str] = None
    average_price: Optional[float] = None
    opening_hours: Optional[str] = None
    status: Optional[ListingStatus] = None
    image_url: Optional[str] = None

    @field_validator("average_price", mode="before")
    @classmethod
    def blank_price_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("name", "city")
    @classmethod
    def required_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be empty")
        return value

    def changes(self) -> dict:
        """Fields explicitly set by the client, minus protected columns."""
        patch = self.model_dump(exclude_unset=True)
        for required in ("name", "city"):
            if patch.get(required, "") is None:
                patch.pop(required)
        return {k: v for k, v in patch.items() if k not in PROTECTED_FIELDS}


class ListingQuery(BaseModel):
    """Parsed ``GET /items`` query parameters."""
    search: Optional[str] = None
    status: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=6, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def window(self) -> tuple[int, int]:
        """Inclusive zero-based row range for this page."""
        start = self.offset
        return start, start + self.limit - 1
