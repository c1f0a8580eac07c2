"""Favorite routes: ``/favorites``."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from src.models.envelope import ok
from src.models.favorite import FavoriteStateRequest
from src.models.user import Identity
from src.routes.deps import parse_body, require_identity
from src.services import favorite_service

router = APIRouter()


# Registered before "/{listing_id}" so the literal path wins
@router.get("/my-favorites")
async def my_favorites(actor: Identity = Depends(require_identity)):
    listings = await favorite_service.list_favorites(actor)
    return ok(data=[listing.model_dump() for listing in listings])


@router.post("/{listing_id}", status_code=201)
async def add_favorite(listing_id: str, actor: Identity = Depends(require_identity)):
    state = await favorite_service.add_favorite(listing_id, actor)
    return ok(data=state.model_dump(by_alias=True), message="Added to favorites")


@router.delete("/{listing_id}")
async def remove_favorite(listing_id: str, actor: Identity = Depends(require_identity)):
    state = await favorite_service.remove_favorite(listing_id, actor)
    return ok(data=state.model_dump(by_alias=True), message="Removed from favorites")


@router.put("/{listing_id}")
async def set_favorite(listing_id: str, body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    request = parse_body(FavoriteStateRequest, body)
    state = await favorite_service.set_favorite(listing_id, actor, request.favorite)
    return ok(data=state.model_dump(by_alias=True))
