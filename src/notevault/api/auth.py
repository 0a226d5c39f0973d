"""Authentication API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from ..core.schemas.common import SuccessResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_optional_token
from ..security import clear_token_cookie, create_access_token, set_token_cookie

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
):
    """Register a new user and sign them in."""
    auth_service = AuthService(session)
    user = await auth_service.register_user(request)
    set_token_cookie(response, create_access_token(user.id))
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
):
    """Login user; the token is returned and set as a cookie."""
    auth_service = AuthService(session)
    user = await auth_service.authenticate_user(request)

    access_token = create_access_token(user.id)
    set_token_cookie(response, access_token)
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=get_settings().access_token_expire_days * 24 * 3600,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_optional_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Logout user; succeeds with or without a token."""
    auth_service = AuthService(session)
    await auth_service.logout_user(token)
    clear_token_cookie(response)
    return SuccessResponse(message="Logged out successfully")
