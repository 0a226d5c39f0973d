"""Middleware for authentication and other cross-cutting concerns."""

from .auth import JWTAuth, get_current_user, get_current_user_id, get_optional_token
from .errors import register_exception_handlers

__all__ = [
    "JWTAuth",
    "get_current_user",
    "get_current_user_id",
    "get_optional_token",
    "register_exception_handlers",
]
