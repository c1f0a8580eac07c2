"""Test helper functions."""

from datetime import timedelta
from typing import Any, Dict, Optional

from src.models.user import User
from src.services.token_verifier import create_access_token


def make_token(user_row: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Issue a bearer token for a seeded ``users`` row."""
    user = User(id=str(user_row["id"]), email=user_row["email"], username=user_row.get("username"))
    return create_access_token(user, expires_delta=expires_delta)


def auth_headers(user_row: Dict[str, Any]) -> Dict[str, str]:
    """Create an Authorization header for a seeded user."""
    return {"Authorization": f"Bearer {make_token(user_row)}"}
