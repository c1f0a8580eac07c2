"""Tests for the scraping trigger and chat proxy endpoints."""

import pytest
from unittest.mock import AsyncMock, patch
from tests.utils.assertions import assert_failure, assert_success

SCRAPE_BODY = {"businessType": "bakery", "city": "Lyon", "country": "France", "maxLeads": 20}


@pytest.mark.unit
def test_trigger_scraping(client, owner_headers):
    result = {"sheetUrl": "https://sheets.example.com/leads", "result": {"ok": True}}
    with patch("src.routes.webhooks.webhook_client.trigger_scraping", new=AsyncMock(return_value=result)) as mock_trigger:
        response = client.post("/api/scraping/trigger", json=SCRAPE_BODY, headers=owner_headers)

    body = assert_success(response)
    assert body["data"] == result
    request = mock_trigger.call_args[0][0]
    assert request.business_type == "bakery"
    assert request.max_leads == 20


@pytest.mark.unit
def test_trigger_scraping_requires_login(client):
    assert_failure(client.post("/api/scraping/trigger", json=SCRAPE_BODY), 401)


@pytest.mark.unit
def test_trigger_scraping_validates_body(client, owner_headers):
    body = dict(SCRAPE_BODY, city="")

    assert_failure(client.post("/api/scraping/trigger", json=body, headers=owner_headers), 400)


@pytest.mark.unit
def test_trigger_scraping_not_configured(client, owner_headers, monkeypatch):
    monkeypatch.delenv("SCRAPING_WEBHOOK_URL", raising=False)

    response = client.post("/api/scraping/trigger", json=SCRAPE_BODY, headers=owner_headers)

    assert_failure(response, 503, "Scraping webhook is not configured")


@pytest.mark.unit
def test_chat(client, owner_headers):
    with patch("src.routes.webhooks.webhook_client.send_chat_message", new=AsyncMock(return_value="Fresh bread at 7!")):
        response = client.post("/api/chat", json={"message": "When do you open?", "sessionId": "session-1"}, headers=owner_headers)

    body = assert_success(response)
    assert body["data"] == {"reply": "Fresh bread at 7!", "sessionId": "session-1"}


@pytest.mark.unit
def test_chat_upstream_failure(client, owner_headers):
    from src.utils.errors import WebhookError

    with patch("src.routes.webhooks.webhook_client.send_chat_message", new=AsyncMock(side_effect=WebhookError())):
        response = client.post("/api/chat", json={"message": "Hi"}, headers=owner_headers)

    assert_failure(response, 502)
