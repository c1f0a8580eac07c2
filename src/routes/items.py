"""Listing routes: ``/items``."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from src.models.envelope import ok
from src.models.listing import ListingCreate, ListingQuery, ListingUpdate
from src.models.user import Identity
from src.routes.deps import get_listing_query, get_optional_identity, parse_body, require_identity
from src.services import listing_service

router = APIRouter()


@router.get("")
async def list_items(
    query: ListingQuery = Depends(get_listing_query),
    viewer: Optional[Identity] = Depends(get_optional_identity),
):
    if viewer is None:
        page = await listing_service.list_listings(query)
    else:
        page = await listing_service.list_listings_for_viewer(query, viewer)
    return ok(data=[item.model_dump() for item in page.items], pagination=page.pagination)


@router.get("/{listing_id}")
async def get_item(listing_id: str):
    listing = await listing_service.get_listing(listing_id)
    return ok(data=listing.model_dump())


@router.post("", status_code=201)
async def create_item(body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    listing = await listing_service.create_listing(parse_body(ListingCreate, body), actor)
    return ok(data=listing.model_dump())


@router.put("/{listing_id}")
async def update_item(listing_id: str, body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    listing = await listing_service.update_listing(listing_id, parse_body(ListingUpdate, body), actor)
    return ok(data=listing.model_dump())


@router.delete("/{listing_id}")
async def delete_item(listing_id: str, actor: Identity = Depends(require_identity)):
    await listing_service.delete_listing(listing_id, actor)
    return ok(message="Deleted successfully")
