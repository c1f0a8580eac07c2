"""HTTP client for the bakeries REST API."""

from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


class ApiError(Exception):
    """A failed call: ``success=false`` envelope or transport failure."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class BakeriesApi:
    """Thin async wrapper returning decoded success envelopes."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000/api",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "BakeriesApi":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> dict:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._client.request(method, path, headers=headers, json=json, params=params)
        except httpx.TimeoutException:
            raise ApiError(0, "Request timed out")
        except httpx.HTTPError:
            raise ApiError(0, "Something went wrong")

        try:
            payload = response.json()
        except ValueError:
            raise ApiError(response.status_code, "Unexpected response from server")

        if not isinstance(payload, dict) or not payload.get("success"):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiError(response.status_code, message or "Request failed")
        return payload

    # auth
    async def register(self, email: str, password: str, username: str) -> dict:
        return await self.request("POST", "/auth/register", json={"email": email, "password": password, "username": username})

    async def login(self, email: str, password: str) -> dict:
        return await self.request("POST", "/auth/login", json={"email": email, "password": password})

    async def me(self, token: str) -> dict:
        return await self.request("GET", "/auth/me", token=token)

    # listings
    async def list_items(self, token: Optional[str], page: int, limit: int, search: str = "", status: str = "") -> dict:
        params = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if status:
            params["status"] = status
        return await self.request("GET", "/items", token=token, params=params)

    async def get_item(self, listing_id: str) -> dict:
        return await self.request("GET", f"/items/{listing_id}")

    async def create_item(self, token: str, fields: dict) -> dict:
        return await self.request("POST", "/items", token=token, json=fields)

    async def update_item(self, token: str, listing_id: str, fields: dict) -> dict:
        return await self.request("PUT", f"/items/{listing_id}", token=token, json=fields)

    async def delete_item(self, token: str, listing_id: str) -> dict:
        return await self.request("DELETE", f"/items/{listing_id}", token=token)

    # favorites and ratings
    async def my_favorites(self, token: str) -> dict:
        return await self.request("GET", "/favorites/my-favorites", token=token)

    async def set_favorite(self, token: str, listing_id: str, favorite: bool) -> dict:
        return await self.request("PUT", f"/favorites/{listing_id}", token=token, json={"favorite": favorite})

    async def rate(self, token: str, listing_id: str, score: int) -> dict:
        return await self.request("POST", "/ratings", token=token, json={"bakeryId": listing_id, "score": score})

    # webhooks
    async def trigger_scraping(self, token: str, payload: dict) -> dict:
        return await self.request("POST", "/scraping/trigger", token=token, json=payload)

    async def chat(self, token: str, message: str, session_id: str) -> dict:
        return await self.request("POST", "/chat", token=token, json={"message": message, "sessionId": session_id})
