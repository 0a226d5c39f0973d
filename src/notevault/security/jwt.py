"""JWT token utilities."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Response
from jose import JWTError, jwt

from ..config import get_settings
from ..core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed identity token for ``user_id`` with a JTI for blacklisting."""
    settings = get_settings()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str) -> Optional[Dict[str, Any]]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate an access token; signature and expiry are checked by jose."""
    payload = _decode(token)
    if not payload or payload.get("type") != "access":
        return None

    jti = payload.get("jti")
    if jti:
        # blacklist lookup is best-effort, an unreachable Redis lets the token through
        try:
            if await get_redis_client().is_token_blacklisted(jti):
                return None
        except Exception as e:
            logger.warning(f"Token blacklist lookup failed: {e}")

    return payload


async def get_user_id_from_token(token: str) -> Optional[int]:
    """Extract the user id from a valid token."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


async def blacklist_token(token: str) -> bool:
    """Blacklist the token's JTI in Redis until the token would expire anyway."""
    payload = _decode(token)
    if not payload or not payload.get("jti") or not payload.get("exp"):
        return False

    expire_time = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    remaining_seconds = int((expire_time - datetime.now(timezone.utc)).total_seconds())
    if remaining_seconds <= 0:
        return False

    return await get_redis_client().add_to_blacklist(payload["jti"], remaining_seconds)


def set_token_cookie(response: Response, token: str) -> None:
    """Attach the token as an HTTP-only cookie living as long as the token."""
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_expire_days * 24 * 3600,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure or settings.is_production,
    )


def clear_token_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure or settings.is_production,
    )
