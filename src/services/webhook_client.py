"""Outbound calls to the scraping and chat webhooks."""

from typing import Any, Optional

import httpx

from src.models.webhook import ChatMessage, ScrapingRequest
from src.utils.config import get_settings
from src.utils.errors import ServiceUnavailableError, WebhookError
from src.utils.logging import get_structured_logger, log_timing, get_correlation_id

logger = get_structured_logger(__name__)


async def _post(url: str, payload: dict, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.Response:
    headers = {}
    correlation_id = get_correlation_id()
    if correlation_id:
        headers["X-Correlation-ID"] = correlation_id

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        raise WebhookError(f"Webhook request failed: {e.__class__.__name__}")

    if response.status_code >= 400:
        logger.warning("Webhook returned error status", status_code=response.status_code)
        raise WebhookError(f"Webhook responded with status {response.status_code}")
    return response


def _body(response: httpx.Response) -> Any:
    """JSON body when the webhook sends JSON, else the raw text."""
    if "application/json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            pass
    return response.text


async def trigger_scraping(request: ScrapingRequest, transport: Optional[httpx.AsyncBaseTransport] = None) -> dict:
    """Start a lead-scraping run and return the webhook's answer."""
    settings = get_settings()
    if not settings.scraping_webhook_url:
        raise ServiceUnavailableError("Scraping webhook is not configured")

    payload = request.model_dump(by_alias=True)
    with log_timing("trigger_scraping", logger=logger, city=request.city, country=request.country):
        response = await _post(
            settings.scraping_webhook_url, payload, settings.webhook_timeout_seconds, transport
        )

    return {"sheetUrl": settings.scraping_results_url, "result": _body(response)}


async def send_chat_message(message: ChatMessage, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Forward one chat message and return the plain-text reply."""
    settings = get_settings()
    if not settings.chat_webhook_url:
        raise ServiceUnavailableError("Chat webhook is not configured")

    payload = {"message": message.message, "sessionId": message.session_id}
    with log_timing("send_chat_message", logger=logger, session_id=message.session_id):
        response = await _post(settings.chat_webhook_url, payload, settings.webhook_timeout_seconds, transport)
    return response.text.strip()
