"""Authentication dependencies."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.exceptions import UnauthorizedError
from ..core.models.user import User
from ..core.repositories.user_repository import UserRepository
from ..database import get_db_session
from ..security import get_user_id_from_token


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """The auth cookie wins over an ``Authorization: Bearer`` header."""
    token = request.cookies.get(get_settings().auth_cookie_name)
    if token:
        return token
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    return None


class JWTAuth(HTTPBearer):
    """JWT authentication from the auth cookie or a Bearer header.

    Resolves to the ``User`` the token names, so a token for a user that no
    longer exists is rejected even while the signature is still valid.
    """

    def __init__(self):
        # missing headers are handled here so cookie-only requests get through
        super().__init__(auto_error=False)

    async def __call__(  # type: ignore[override]
        self, request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> User:
        credentials = await super().__call__(request)
        token = extract_token(request, credentials)
        if not token:
            raise UnauthorizedError("Access denied. No token provided")

        user_id = await get_user_id_from_token(token)
        if user_id is None:
            raise UnauthorizedError("Invalid token")

        user = await UserRepository(session).get_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")

        request.state.user_id = user.id
        return user


jwt_auth = JWTAuth()


async def get_current_user(user: User = Depends(jwt_auth)) -> User:
    """Get current authenticated user."""
    return user


async def get_current_user_id(user: User = Depends(jwt_auth)) -> int:
    """Get current authenticated user ID."""
    return user.id


async def get_optional_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False))
) -> Optional[str]:
    """The presented token, if any, without validating it."""
    return extract_token(request, credentials)
