"""Security utilities."""

from .jwt import (
    blacklist_token,
    clear_token_cookie,
    create_access_token,
    decode_access_token,
    get_user_id_from_token,
    set_token_cookie,
)
from .password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "get_user_id_from_token",
    "blacklist_token",
    "set_token_cookie",
    "clear_token_cookie",
]
