"""Favorite relationships between users and listings."""

from src.models.favorite import FavoriteState
from src.models.listing import Listing
from src.models.user import Identity
from src.services.listing_service import get_listing, listing_from_row
from src.services.supabase_client import SupabaseClient, BAKERIES_TABLE, FAVORITES_TABLE, first_row
from src.utils.errors import ConflictError, NotFoundError, SupabaseError, is_invalid_input, is_unique_violation
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

ALREADY_FAVORITE = "Already a favorite"


async def add_favorite(listing_id: str, actor: Identity) -> FavoriteState:
    """Create the (actor, listing) relationship; duplicates raise ConflictError."""
    await get_listing(listing_id)

    async with SupabaseClient() as client:
        try:
            client.table(FAVORITES_TABLE).insert({
                "user_id": actor.id,
                "bakery_id": listing_id,
            }).execute()
        except Exception as e:
            # The (user_id, bakery_id) unique constraint is the source of truth
            if is_unique_violation(e):
                raise ConflictError(ALREADY_FAVORITE)
            raise SupabaseError(f"Failed to add favorite: {e}")

    logger.info("Favorite added", listing_id=listing_id, actor=mask_user_id(actor.id))
    return FavoriteState(bakery_id=listing_id, favorite=True)


async def remove_favorite(listing_id: str, actor: Identity) -> FavoriteState:
    """Delete the (actor, listing) relationship."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(FAVORITES_TABLE)
                .delete()
                .eq("user_id", actor.id)
                .eq("bakery_id", listing_id)
                .execute()
            )
        except Exception as e:
            if is_invalid_input(e):
                raise NotFoundError("Favorite not found")
            raise SupabaseError(f"Failed to remove favorite: {e}")

    if first_row(result) is None:
        raise NotFoundError("Favorite not found")
    logger.info("Favorite removed", listing_id=listing_id, actor=mask_user_id(actor.id))
    return FavoriteState(bakery_id=listing_id, favorite=False)


async def set_favorite(listing_id: str, actor: Identity, favorite: bool) -> FavoriteState:
    """
    Idempotently set the favorite state.

    Repeating the call with the same ``favorite`` value is a no-op, so
    concurrent clients converge on the last requested state.
    """
    if favorite:
        await get_listing(listing_id)

    with log_timing("set_favorite", logger=logger, listing_id=listing_id, favorite=favorite):
        async with SupabaseClient() as client:
            try:
                table = client.table(FAVORITES_TABLE)
                if favorite:
                    table.upsert(
                        {"user_id": actor.id, "bakery_id": listing_id},
                        on_conflict="user_id,bakery_id",
                        ignore_duplicates=True,
                    ).execute()
                else:
                    table.delete().eq("user_id", actor.id).eq("bakery_id", listing_id).execute()
            except Exception as e:
                # Nothing is ever stored under a malformed id
                if not favorite and is_invalid_input(e):
                    return FavoriteState(bakery_id=listing_id, favorite=False)
                raise SupabaseError(f"Failed to set favorite: {e}")

    return FavoriteState(bakery_id=listing_id, favorite=favorite)


async def list_favorites(actor: Identity) -> list[Listing]:
    """Listings favorited by ``actor``, newest listing first."""
    with log_timing("list_favorites", logger=logger, actor=mask_user_id(actor.id)):
        async with SupabaseClient() as client:
            try:
                links = client.table(FAVORITES_TABLE).select("bakery_id").eq("user_id", actor.id).execute()
                ids = [str(row["bakery_id"]) for row in (links.data or [])]
                if not ids:
                    return []
                result = (
                    client.table(BAKERIES_TABLE)
                    .select("*")
                    .in_("id", ids)
                    .order("created_at", desc=True)
                    .execute()
                )
            except Exception as e:
                raise SupabaseError(f"Failed to list favorites: {e}")

    return [listing_from_row(row) for row in (result.data or [])]
