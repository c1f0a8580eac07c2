"""Supabase client wrapper with async context manager support."""

from typing import Any, Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.config import get_settings
from src.utils.errors import BakeriesError, SupabaseError
import logging

logger = logging.getLogger(__name__)

BAKERIES_TABLE = "bakeries"
FAVORITES_TABLE = "favorites"
RATINGS_TABLE = "ratings"
USERS_TABLE = "users"

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        settings = get_settings()
        url = settings.supabase_url
        key = settings.supabase_key

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        # Service-role client: no end-user session is kept server side
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def close_supabase_client() -> None:
    """Drop the Supabase client singleton."""
    global _client
    if _client:
        # Supabase-py has no explicit close; clearing the reference is enough
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        """Enter async context."""
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        # Domain outcomes (not found, forbidden, ...) are not backend failures
        if exc_type and (not issubclass(exc_type, BakeriesError) or issubclass(exc_type, SupabaseError)):
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


def first_row(result: Any) -> Optional[dict]:
    """First row of an ``execute()`` result, or None."""
    data = getattr(result, "data", None)
    return data[0] if data and len(data) > 0 else None
