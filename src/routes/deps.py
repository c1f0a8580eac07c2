"""Request dependencies: bearer identity and listing query parsing."""

from typing import Any, Optional

from fastapi import Header, Query
from pydantic import BaseModel, ValidationError

from src.models.listing import ListingQuery
from src.models.user import Identity
from src.services.token_verifier import parse_bearer, verify_token
from src.utils.config import get_settings
from src.utils.errors import AuthenticationError, InvalidRequestError


def get_optional_identity(authorization: Optional[str] = Header(default=None)) -> Optional[Identity]:
    """Identity when a valid bearer token is present; anonymous otherwise."""
    return verify_token(parse_bearer(authorization))


def require_identity(authorization: Optional[str] = Header(default=None)) -> Identity:
    """Identity of the caller; 401 without a valid bearer token."""
    token = parse_bearer(authorization)
    if token is None:
        raise AuthenticationError("No token, authorization denied")
    identity = verify_token(token)
    if identity is None:
        raise AuthenticationError("Token is not valid")
    return identity


def _positive_int(raw: Optional[str], name: str, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidRequestError(f"{name} must be a positive integer")
    if value < 1:
        raise InvalidRequestError(f"{name} must be a positive integer")
    return value


def get_listing_query(
    search: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
) -> ListingQuery:
    """Parse ``GET /items`` parameters; ``limit`` is clamped to MAX_PAGE_LIMIT."""
    settings = get_settings()
    page_value = _positive_int(page, "page", 1)
    limit_value = min(_positive_int(limit, "limit", settings.default_page_limit), settings.max_page_limit)
    return ListingQuery(
        search=(search or "").strip() or None,
        status=(status or "").strip() or None,
        page=page_value,
        limit=limit_value,
    )


def validation_message(errors: list) -> str:
    """Human-readable summary of the first validation error."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    reason = first.get("msg", "is invalid")
    return f"{field}: {reason}" if field else reason


def parse_body(model: type[BaseModel], body: Any) -> Any:
    """Validate a JSON body into ``model``; a missing body counts as ``{}``."""
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(validation_message(e.errors()))
