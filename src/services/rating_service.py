"""Rating submission and aggregate maintenance."""

from src.models.rating import RatingResult, RatingSubmission
from src.models.user import Identity
from src.services.listing_service import get_listing
from src.services.supabase_client import SupabaseClient, BAKERIES_TABLE, RATINGS_TABLE
from src.utils.errors import SupabaseError
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)


def mean_rating(scores: list[int]) -> float:
    """Arithmetic mean rounded to 2 decimals (0.0 for no scores)."""
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 2)


async def submit_rating(submission: RatingSubmission, actor: Identity) -> RatingResult:
    """
    Record ``actor``'s score for a listing and refresh the listing's aggregate.

    One score per (user, listing): resubmitting replaces the earlier score.
    The aggregate is recomputed from every stored score, so a later
    submission always corrects an aggregate written by an overlapping one.
    """
    listing_id = submission.bakery_id
    await get_listing(listing_id)

    with log_timing("submit_rating", logger=logger, listing_id=listing_id):
        async with SupabaseClient() as client:
            try:
                client.table(RATINGS_TABLE).upsert(
                    {"user_id": actor.id, "bakery_id": listing_id, "score": submission.score},
                    on_conflict="user_id,bakery_id",
                ).execute()

                stored = client.table(RATINGS_TABLE).select("score").eq("bakery_id", listing_id).execute()
                scores = [int(row["score"]) for row in (stored.data or [])]
                new_rating = mean_rating(scores)

                client.table(BAKERIES_TABLE).update({"rating": new_rating}).eq("id", listing_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to submit rating: {e}")

    logger.info(
        "Rating submitted",
        listing_id=listing_id,
        actor=mask_user_id(actor.id),
        new_rating=new_rating,
        rating_count=len(scores),
    )
    return RatingResult(
        bakery_id=listing_id,
        score=submission.score,
        new_rating=new_rating,
        rating_count=max(len(scores), 1),
    )
