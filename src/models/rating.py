"""Rating models."""

from pydantic import BaseModel, ConfigDict, Field

MIN_SCORE = 1
MAX_SCORE = 5


class RatingSubmission(BaseModel):
    """``POST /ratings`` body."""
    model_config = ConfigDict(populate_by_name=True)

    bakery_id: str = Field(..., alias="bakeryId", min_length=1, description="Listing ID")
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE, description="Score (1-5)")


class RatingResult(BaseModel):
    """Aggregate after a rating submission."""
    model_config = ConfigDict(populate_by_name=True)

    bakery_id: str = Field(..., alias="bakeryId")
    score: int
    new_rating: float = Field(..., alias="newRating", description="Mean of current scores")
    rating_count: int = Field(..., alias="ratingCount", ge=1)


def is_valid_score(score: object) -> bool:
    """Check a score before it is sent anywhere."""
    return isinstance(score, int) and not isinstance(score, bool) and MIN_SCORE <= score <= MAX_SCORE
