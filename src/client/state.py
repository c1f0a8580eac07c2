"""Client application state, passed explicitly to every handler."""

from dataclasses import dataclass, field
from typing import Optional

DASHBOARD = "dashboard"
LOGIN = "login"
FAVORITES = "favorites"
ADD_BAKERY = "add-bakery"
SCRAPING = "scraping"

# Views that bounce anonymous users to the login view
AUTH_ONLY_VIEWS = frozenset({FAVORITES, ADD_BAKERY, SCRAPING})


@dataclass
class AppState:
    token: Optional[str] = None
    user: Optional[dict] = None
    current_view: str = DASHBOARD
    listings: list[dict] = field(default_factory=list)
    favorites: set[str] = field(default_factory=set)
    page: int = 1
    limit: int = 6
    total_pages: int = 0
    search: str = ""
    status: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    @property
    def user_id(self) -> Optional[str]:
        return str(self.user["id"]) if self.user else None

    def find_listing(self, listing_id: str) -> Optional[dict]:
        for listing in self.listings:
            if str(listing.get("id")) == listing_id:
                return listing
        return None

    def owns(self, listing: dict) -> bool:
        """Whether the signed-in user created ``listing``."""
        return self.user_id is not None and str(listing.get("created_by")) == self.user_id

    def clear_session(self) -> None:
        self.token = None
        self.user = None
        self.favorites = set()
