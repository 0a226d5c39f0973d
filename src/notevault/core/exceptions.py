"""
Domain errors raised by services and the auth dependency.

Each error carries the HTTP status it maps to; the handlers in
``middleware.errors`` turn them into ``ErrorResponse`` bodies.
"""

from typing import Any, Optional

from fastapi import status


class NoteVaultError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def error(self) -> str:
        return type(self).__name__


class ValidationError(NoteVaultError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class UnauthorizedError(NoteVaultError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(NoteVaultError):
    """Authenticated but not allowed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(NoteVaultError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(NoteVaultError):
    """A unique field already holds the value."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(NoteVaultError):
    """Store failure or unexpected condition."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
