"""Account routes: ``/auth``."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from src.models.envelope import ok
from src.models.user import Identity, LoginRequest, RegisterRequest
from src.routes.deps import parse_body, require_identity
from src.services import user_service

router = APIRouter()


@router.post("/register", status_code=201)
async def register(body: Any = Body(default=None)):
    result = await user_service.register(parse_body(RegisterRequest, body))
    return ok(data=result.model_dump())


@router.post("/login")
async def login(body: Any = Body(default=None)):
    result = await user_service.login(parse_body(LoginRequest, body))
    return ok(data=result.model_dump())


@router.get("/me")
async def me(identity: Identity = Depends(require_identity)):
    user = await user_service.get_user(identity)
    return ok(data=user.model_dump())
