"""Rating routes: ``/ratings``."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from src.models.envelope import ok
from src.models.rating import RatingSubmission
from src.models.user import Identity
from src.routes.deps import parse_body, require_identity
from src.services import rating_service

router = APIRouter()


@router.post("")
async def rate(body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    # Out-of-range scores fail validation here, before any backend call
    submission = parse_body(RatingSubmission, body)
    result = await rating_service.submit_rating(submission, actor)
    return ok(data=result.model_dump(by_alias=True), message="Rating submitted")
