"""Current user profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import PasswordChangeRequest, UserResponse, UserUpdateRequest
from ..core.schemas.common import SuccessResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_profile(
    current_user_id: int = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get current user profile."""
    auth_service = AuthService(session)
    return await auth_service.get_current_user(current_user_id)


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    request: UserUpdateRequest,
    current_user_id: int = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update name and/or email."""
    auth_service = AuthService(session)
    return await auth_service.update_user_profile(current_user_id, request)


@router.patch("/me/password", response_model=SuccessResponse)
async def change_password(
    request: PasswordChangeRequest,
    current_user_id: int = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Change user password."""
    auth_service = AuthService(session)
    await auth_service.change_password(current_user_id, request)
    return SuccessResponse(message="Password changed successfully")
