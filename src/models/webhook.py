"""Payloads forwarded to third-party webhooks (scraping, chat)."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ScrapingRequest(BaseModel):
    """Lead-scraping job parameters."""
    model_config = ConfigDict(populate_by_name=True)

    business_type: str = Field(..., alias="businessType", min_length=1)
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    max_leads: int = Field(default=10, alias="maxLeads", ge=1, le=500)


class ChatMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    session_id: Optional[str] = Field(None, alias="sessionId")
