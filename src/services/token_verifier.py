"""Bearer token issuance and verification (HS256 JWT)."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from src.models.user import Identity, User
from src.utils.config import get_settings
from src.utils.errors import BakeriesError

logger = logging.getLogger(__name__)


def get_jwt_secret() -> str:
    """Get the token signing secret from settings."""
    secret = get_settings().jwt_secret
    if not secret:
        raise BakeriesError("JWT_SECRET not set")
    return secret


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token carrying the user's id, email and username."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "id": user.id,
        "sub": user.id,
        "email": user.email,
        "username": user.username,
        "exp": expire,
    }
    return jwt.encode(claims, get_jwt_secret(), algorithm=settings.jwt_algorithm)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_token(token: Optional[str]) -> Optional[Identity]:
    """
    Verify a bearer token.

    Returns the caller identity, or None when the token is absent, malformed,
    expired, signed with another key, or no secret is configured.
    """
    if not token:
        return None

    secret = get_settings().jwt_secret
    if not secret:
        logger.warning("Token verification skipped: JWT_SECRET not set")
        return None

    try:
        payload = jwt.decode(token, secret, algorithms=[get_settings().jwt_algorithm])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        return None
    return Identity(id=str(user_id), email=payload.get("email"), username=payload.get("username"))
