"""Error handling utilities."""

from typing import Optional


class BakeriesError(Exception):
    """Base exception for the bakeries backend."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(BakeriesError):
    """Request payload or query failed validation."""
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(BakeriesError):
    """Missing or invalid bearer credential."""
    status_code = 401
    default_message = "Token is not valid"


class ForbiddenError(BakeriesError):
    """Actor is not allowed to mutate the record."""
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(BakeriesError):
    """No record for the given id."""
    status_code = 404
    default_message = "Not found"


class ConflictError(BakeriesError):
    """Unique constraint hit (duplicate favorite, duplicate account)."""
    status_code = 409
    default_message = "Already exists"


class SupabaseError(BakeriesError):
    """Supabase operation error."""
    status_code = 500
    default_message = "Server error"


class WebhookError(BakeriesError):
    """Third-party webhook call failed."""
    status_code = 502
    default_message = "Upstream webhook failed"


class ServiceUnavailableError(BakeriesError):
    """A collaborator needed for the request is not configured."""
    status_code = 503
    default_message = "Service unavailable"


def is_unique_violation(exc: Exception) -> bool:
    """Check whether a Supabase/PostgREST error is a unique-key violation."""
    if getattr(exc, "code", None) == "23505":
        return True
    return "duplicate key" in str(exc).lower()


def is_invalid_input(exc: Exception) -> bool:
    """Check whether a PostgREST error comes from a malformed id value."""
    if getattr(exc, "code", None) == "22P02":
        return True
    return "invalid input syntax" in str(exc).lower()
