"""Scraping trigger and chat proxy routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from src.models.envelope import ok
from src.models.user import Identity
from src.models.webhook import ChatMessage, ScrapingRequest
from src.routes.deps import parse_body, require_identity
from src.services import webhook_client

router = APIRouter()


@router.post("/scraping/trigger")
async def trigger_scraping(body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    request = parse_body(ScrapingRequest, body)
    result = await webhook_client.trigger_scraping(request)
    return ok(data=result, message="Scraping completed successfully")


@router.post("/chat")
async def chat(body: Any = Body(default=None), actor: Identity = Depends(require_identity)):
    message = parse_body(ChatMessage, body)
    reply = await webhook_client.send_chat_message(message)
    return ok(data={"reply": reply, "sessionId": message.session_id})
