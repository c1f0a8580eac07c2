"""Listing query service and ownership-gated mutations for the ``bakeries`` table."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import ValidationError

from src.models.envelope import Pagination
from src.models.listing import Listing, ListingCreate, ListingQuery, ListingUpdate
from src.models.user import Identity
from src.services.supabase_client import SupabaseClient, BAKERIES_TABLE, first_row
from src.utils.errors import (
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    SupabaseError,
    is_invalid_input,
)
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

# PostgREST answers 416 when the requested offset is past the last row
RANGE_NOT_SATISFIABLE = "PGRST103"
POSTGREST_WILDCARD = "*"


@dataclass
class ListingPage:
    """One page of listings plus the unpaginated total."""
    items: list[Listing] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 6

    @property
    def pagination(self) -> Pagination:
        return Pagination.build(self.total, self.page, self.limit)


def escape_like(value: str) -> str:
    """
    Escape LIKE wildcards so user input matches literally.

    PostgREST rewrites ``*`` to ``%`` inside like/ilike values with no escape,
    so callers reject searches containing it (see ``list_listings``).
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def listing_from_row(row: dict) -> Listing:
    """Build a Listing from a stored row; a malformed row is a backend failure."""
    try:
        return Listing(**row)
    except ValidationError as e:
        raise SupabaseError(f"Malformed bakeries row {row.get('id')}: {e}")


def _apply_filters(builder, query: ListingQuery):
    # Search is a case-insensitive prefix match on name only
    if query.search:
        builder = builder.ilike("name", f"{escape_like(query.search)}%")
    if query.status:
        builder = builder.eq("status", query.status)
    return builder


async def list_listings(query: ListingQuery) -> ListingPage:
    """Filtered, newest-first page of listings for an anonymous caller."""
    if query.search and POSTGREST_WILDCARD in query.search:
        raise InvalidRequestError(f"search must not contain '{POSTGREST_WILDCARD}'")
    start, end = query.window()
    with log_timing("list_listings", logger=logger, page=query.page, limit=query.limit):
        async with SupabaseClient() as client:
            try:
                builder = _apply_filters(client.table(BAKERIES_TABLE).select("*", count="exact"), query)
                result = builder.order("created_at", desc=True).range(start, end).execute()
            except Exception as e:
                if getattr(e, "code", None) != RANGE_NOT_SATISFIABLE:
                    raise SupabaseError(f"Failed to list listings: {e}")
                # Page past the end: empty page, real total
                counted = _apply_filters(
                    client.table(BAKERIES_TABLE).select("id", count="exact"), query
                ).range(0, 0).execute()
                return ListingPage(items=[], total=counted.count or 0, page=query.page, limit=query.limit)

    rows = result.data or []
    total = result.count if result.count is not None else len(rows)
    return ListingPage(
        items=[listing_from_row(row) for row in rows],
        total=total,
        page=query.page,
        limit=query.limit,
    )


async def list_listings_for_viewer(query: ListingQuery, viewer: Identity) -> ListingPage:
    """
    Same page as ``list_listings`` for an authenticated caller.

    Items and order are identical; each item additionally carries ``is_owner``
    so clients can show edit/delete controls.
    """
    page = await list_listings(query)
    page.items = [
        Listing(**{**item.model_dump(), "is_owner": item.created_by == viewer.id})
        for item in page.items
    ]
    return page


async def get_listing(listing_id: str) -> Listing:
    """Exact-id lookup."""
    async with SupabaseClient() as client:
        try:
            result = client.table(BAKERIES_TABLE).select("*").eq("id", listing_id).limit(1).execute()
        except Exception as e:
            if is_invalid_input(e):
                raise NotFoundError("Bakery not found")
            raise SupabaseError(f"Failed to get listing: {e}")

    row = first_row(result)
    if row is None:
        raise NotFoundError("Bakery not found")
    return listing_from_row(row)


async def create_listing(payload: ListingCreate, actor: Identity) -> Listing:
    """Insert a listing owned by ``actor``."""
    if payload.missing_required():
        raise InvalidRequestError("Name and City are required")

    row = payload.to_row(actor.id)
    with log_timing("create_listing", logger=logger, actor=mask_user_id(actor.id)):
        async with SupabaseClient() as client:
            try:
                result = client.table(BAKERIES_TABLE).insert(row).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to create listing: {e}")

    created = first_row(result)
    if created is None:
        raise SupabaseError("Failed to create listing: no data returned")
    logger.info("Listing created", listing_id=created.get("id"), actor=mask_user_id(actor.id))
    return listing_from_row(created)


async def _creator_of(listing_id: str) -> Optional[str]:
    """Creator reference of a listing, or None when it does not exist."""
    async with SupabaseClient() as client:
        try:
            result = client.table(BAKERIES_TABLE).select("created_by").eq("id", listing_id).limit(1).execute()
        except Exception as e:
            if is_invalid_input(e):
                return None
            raise SupabaseError(f"Failed to read listing owner: {e}")
    row = first_row(result)
    if row is None:
        return None
    return str(row.get("created_by"))


async def _explain_missed_write(listing_id: str, action: str) -> None:
    """Raise NotFound or Forbidden after a conditional write matched no row."""
    if await _creator_of(listing_id) is None:
        raise NotFoundError("Not found")
    raise ForbiddenError(f"Not authorized to {action} this item")


async def update_listing(listing_id: str, patch: ListingUpdate, actor: Identity) -> Listing:
    """
    Apply ``patch`` if ``actor`` created the listing.

    The write is conditional on both id and creator, so there is no window in
    which another actor's record can be modified.
    """
    changes = patch.changes()
    if not changes:
        raise InvalidRequestError("No updatable fields provided")

    with log_timing("update_listing", logger=logger, listing_id=listing_id):
        async with SupabaseClient() as client:
            try:
                result = (
                    client.table(BAKERIES_TABLE)
                    .update(changes)
                    .eq("id", listing_id)
                    .eq("created_by", actor.id)
                    .execute()
                )
            except Exception as e:
                if is_invalid_input(e):
                    raise NotFoundError("Not found")
                raise SupabaseError(f"Failed to update listing: {e}")

    updated = first_row(result)
    if updated is None:
        await _explain_missed_write(listing_id, "update")
    logger.info("Listing updated", listing_id=listing_id, fields=sorted(changes))
    return listing_from_row(updated)


async def delete_listing(listing_id: str, actor: Identity) -> None:
    """Delete the listing if ``actor`` created it."""
    with log_timing("delete_listing", logger=logger, listing_id=listing_id):
        async with SupabaseClient() as client:
            try:
                result = (
                    client.table(BAKERIES_TABLE)
                    .delete()
                    .eq("id", listing_id)
                    .eq("created_by", actor.id)
                    .execute()
                )
            except Exception as e:
                if is_invalid_input(e):
                    raise NotFoundError("Not found")
                raise SupabaseError(f"Failed to delete listing: {e}")

    if first_row(result) is None:
        await _explain_missed_write(listing_id, "delete")
    logger.info("Listing deleted", listing_id=listing_id, actor=mask_user_id(actor.id))
