"""Environment-backed application settings."""

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


def _env_str(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


class Settings(BaseModel):
    """Runtime configuration for the bakeries API."""
    api_prefix: str = Field(default="/api", description="Prefix for all REST routes")
    supabase_url: Optional[str] = Field(None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(None, description="Supabase service role key")
    jwt_secret: Optional[str] = Field(None, description="HMAC secret for bearer tokens")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24, ge=1)
    default_page_limit: int = Field(default=6, ge=1)
    max_page_limit: int = Field(default=100, ge=1)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    scraping_webhook_url: Optional[str] = None
    scraping_results_url: Optional[str] = None
    chat_webhook_url: Optional[str] = None
    webhook_timeout_seconds: float = Field(default=120.0, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            api_prefix=os.environ.get("API_PREFIX", "/api"),
            supabase_url=_env_str("SUPABASE_URL"),
            supabase_key=_env_str("SUPABASE_SERVICE_ROLE_KEY"),
            jwt_secret=_env_str("JWT_SECRET"),
            jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24),
            default_page_limit=_env_int("DEFAULT_PAGE_LIMIT", 6),
            max_page_limit=_env_int("MAX_PAGE_LIMIT", 100),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            scraping_webhook_url=_env_str("SCRAPING_WEBHOOK_URL"),
            scraping_results_url=_env_str("SCRAPING_RESULTS_URL"),
            chat_webhook_url=_env_str("CHAT_WEBHOOK_URL"),
            webhook_timeout_seconds=float(os.environ.get("WEBHOOK_TIMEOUT_SECONDS", "120")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings.from_env()
