"""Client-side orchestration: session, listing browsing, favorites, ratings."""

from contextlib import contextmanager
from typing import Iterator, Optional

from src.client import state as views
from src.client.api import ApiError, BakeriesApi
from src.client.notifications import Notifier
from src.client.state import AppState
from src.models.rating import MAX_SCORE, MIN_SCORE, is_valid_score
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

LISTING_FORM_FIELDS = ("name", "city", "specialties", "average_price", "opening_hours", "status", "image_url")


class InFlightGuard:
    """Skips a mutation while an identical one is still pending."""

    def __init__(self):
        self._pending: set[tuple] = set()

    @contextmanager
    def hold(self, key: tuple) -> Iterator[bool]:
        if key in self._pending:
            yield False
            return
        self._pending.add(key)
        try:
            yield True
        finally:
            self._pending.discard(key)

    def is_pending(self, key: tuple) -> bool:
        return key in self._pending


class Interactions:
    """
    Event handlers for the listing UI.

    Every handler takes the ``AppState`` it acts on; the only things held here
    are the API client, the notifier and the in-flight guard.
    """

    def __init__(self, api: BakeriesApi, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.guard = InFlightGuard()

    # session

    async def init(self, state: AppState) -> None:
        """Restore the session from a stored token, then show the dashboard."""
        if state.token:
            try:
                payload = await self.api.me(state.token)
                state.user = payload["data"]
            except ApiError:
                state.clear_session()
        if state.is_authenticated:
            await self.load_favorites(state)
        await self.navigate(state, views.DASHBOARD)

    async def login(self, state: AppState, email: str, password: str) -> bool:
        try:
            payload = await self.api.login(email, password)
        except ApiError as e:
            self.notifier.error(e.message)
            return False
        await self._start_session(state, payload["data"])
        self.notifier.success("Welcome back!")
        return True

    async def register(self, state: AppState, email: str, password: str, username: str) -> bool:
        try:
            payload = await self.api.register(email, password, username)
        except ApiError as e:
            self.notifier.error(e.message)
            return False
        await self._start_session(state, payload["data"])
        self.notifier.success("Account created!")
        return True

    async def _start_session(self, state: AppState, auth: dict) -> None:
        state.token = auth["token"]
        state.user = auth["user"]
        await self.load_favorites(state)
        await self.navigate(state, views.DASHBOARD)

    async def logout(self, state: AppState) -> None:
        state.clear_session()
        await self.navigate(state, views.DASHBOARD)

    async def navigate(self, state: AppState, view: str) -> str:
        """Switch view, loading its data; protected views fall back to login."""
        if view in views.AUTH_ONLY_VIEWS and not state.is_authenticated:
            view = views.LOGIN
        state.current_view = view
        if view == views.DASHBOARD:
            await self.fetch_listings(state)
        elif view == views.FAVORITES:
            await self.fetch_favorites(state)
        return view

    # listings

    async def fetch_listings(self, state: AppState) -> list[dict]:
        try:
            payload = await self.api.list_items(state.token, state.page, state.limit, state.search, state.status)
        except ApiError as e:
            logger.warning("Listing fetch failed", status_code=e.status_code)
            self.notifier.error(e.message)
            return state.listings

        state.listings = payload["data"]
        pagination = payload.get("pagination") or {}
        state.page = pagination.get("page", state.page)
        state.total_pages = pagination.get("totalPages", 0)
        return state.listings

    async def search(self, state: AppState, text: str) -> list[dict]:
        state.search = text.strip()
        state.page = 1
        return await self.fetch_listings(state)

    async def filter_status(self, state: AppState, status: str) -> list[dict]:
        state.status = status
        state.page = 1
        return await self.fetch_listings(state)

    async def next_page(self, state: AppState) -> int:
        if state.total_pages and state.page >= state.total_pages:
            return state.page
        state.page += 1
        await self.fetch_listings(state)
        return state.page

    async def prev_page(self, state: AppState) -> int:
        if state.page > 1:
            state.page -= 1
            await self.fetch_listings(state)
        return state.page

    def form_for(self, state: AppState, listing_id: str) -> Optional[dict]:
        """Edit-form values for a listing on the current page."""
        listing = state.find_listing(listing_id)
        if listing is None:
            return None
        form = {name: listing.get(name) for name in LISTING_FORM_FIELDS}
        form["id"] = listing_id
        return form

    async def submit_listing(self, state: AppState, fields: dict, listing_id: Optional[str] = None) -> Optional[dict]:
        """Create (no id) or update (id) a listing from form fields."""
        if not state.is_authenticated:
            self.notifier.info("Please login first")
            return None
        body = {k: v for k, v in fields.items() if k in LISTING_FORM_FIELDS}
        try:
            if listing_id:
                payload = await self.api.update_item(state.token, listing_id, body)
            else:
                payload = await self.api.create_item(state.token, body)
        except ApiError as e:
            self.notifier.error(e.message)
            return None
        self.notifier.success("Bakery updated!" if listing_id else "Bakery added!")
        await self.navigate(state, views.DASHBOARD)
        return payload["data"]

    async def delete_listing(self, state: AppState, listing_id: str) -> bool:
        if not state.is_authenticated:
            self.notifier.info("Please login first")
            return False
        with self.guard.hold((state.user_id, "delete", listing_id)) as acquired:
            if not acquired:
                return False
            try:
                await self.api.delete_item(state.token, listing_id)
            except ApiError as e:
                self.notifier.error(e.message)
                return False
        state.favorites.discard(listing_id)
        await self.fetch_listings(state)
        return True

    # favorites

    async def load_favorites(self, state: AppState) -> list[dict]:
        """Refresh the local favorite-id set from the server."""
        if not state.is_authenticated:
            state.favorites = set()
            return []
        try:
            payload = await self.api.my_favorites(state.token)
        except ApiError as e:
            logger.warning("Favorite refresh failed", status_code=e.status_code)
            return []
        listings = payload["data"]
        state.favorites = {str(item["id"]) for item in listings}
        return listings

    async def fetch_favorites(self, state: AppState) -> list[dict]:
        return await self.load_favorites(state)

    async def toggle_favorite(self, state: AppState, listing_id: str) -> Optional[bool]:
        """
        Flip the favorite state of a listing.

        The desired state is computed from the local set and sent as one
        idempotent call; the server's answer is what lands in the local set.
        Returns the new state, or None when nothing was changed.
        """
        if not state.is_authenticated:
            self.notifier.info("Please login to add favorites")
            return None

        with self.guard.hold((state.user_id, "favorite", listing_id)) as acquired:
            if not acquired:
                return None
            desired = listing_id not in state.favorites
            try:
                payload = await self.api.set_favorite(state.token, listing_id, desired)
            except ApiError as e:
                self.notifier.error(e.message)
                # Local set may be stale; take the server's view
                await self.load_favorites(state)
                return None

        confirmed = bool(payload["data"]["favorite"])
        if confirmed:
            state.favorites.add(listing_id)
            self.notifier.success("Added to favorites")
        else:
            state.favorites.discard(listing_id)
            self.notifier.success("Removed from favorites")

        if state.current_view == views.FAVORITES:
            await self.fetch_favorites(state)
        return confirmed

    # ratings

    async def rate_listing(self, state: AppState, listing_id: str, score: int) -> Optional[float]:
        """Submit a score; the returned aggregate is applied to the local listing."""
        if not state.is_authenticated:
            self.notifier.info("Login to rate!")
            return None
        if not is_valid_score(score):
            self.notifier.error(f"Rating must be between {MIN_SCORE} and {MAX_SCORE}")
            return None

        with self.guard.hold((state.user_id, "rating", listing_id)) as acquired:
            if not acquired:
                return None
            try:
                payload = await self.api.rate(state.token, listing_id, score)
            except ApiError as e:
                self.notifier.error(e.message)
                return None

        new_rating = payload["data"]["newRating"]
        listing = state.find_listing(listing_id)
        if listing is not None:
            listing["rating"] = new_rating
        self.notifier.success("Rating submitted!")
        return new_rating

    # scraping

    async def trigger_scraping(self, state: AppState, business_type: str, city: str, country: str, max_leads: int) -> Optional[dict]:
        if not state.is_authenticated:
            await self.navigate(state, views.LOGIN)
            return None
        with self.guard.hold((state.user_id, "scraping")) as acquired:
            if not acquired:
                return None
            payload = {"businessType": business_type, "city": city, "country": country, "maxLeads": max_leads}
            try:
                result = await self.api.trigger_scraping(state.token, payload)
            except ApiError as e:
                self.notifier.error(e.message)
                return None
        self.notifier.success("Scraping completed successfully!")
        return result["data"]
