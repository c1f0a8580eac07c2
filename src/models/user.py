"""User and identity models."""

from typing import Optional
from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Caller identity extracted from a verified bearer credential."""
    id: str = Field(..., description="User ID")
    email: Optional[str] = None
    username: Optional[str] = None


class User(BaseModel):
    """Public view of an account (never carries the credential hash)."""
    id: str
    email: str
    username: Optional[str] = None
    created_at: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResult(BaseModel):
    """Token plus the user it was issued for."""
    token: str
    user: User
