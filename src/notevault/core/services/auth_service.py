"""Authentication service implementation."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security import blacklist_token, hash_password, verify_password
from ..exceptions import ConflictError, InternalError, NotFoundError, UnauthorizedError, ValidationError
from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def register_user(self, request: RegisterRequest) -> User:
        """Register new user."""
        email = User.normalize_email(request.email)

        if await self.user_repo.is_email_taken(email):
            raise ConflictError("User already exists")

        user_data = {
            "name": request.name,
            "email": email,
            "password_hash": hash_password(request.password),
        }

        user = await self.user_repo.create_user(user_data)
        await self._commit("register user")
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate_user(self, request: LoginRequest) -> User:
        """Login user; unknown email and wrong password look the same."""
        user = await self.user_repo.get_by_email(User.normalize_email(request.email))
        if not user or not verify_password(request.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return user

    async def logout_user(self, access_token: Optional[str]) -> bool:
        """Logout user with Redis token blacklisting.

        The cookie is cleared by the route regardless; blacklisting only
        matters for copies of the token held elsewhere.
        """
        if not access_token:
            return False
        try:
            return await blacklist_token(access_token)
        except Exception as e:
            # Redis down must not block logout
            logger.warning(f"Failed to blacklist token in Redis: {e}")
            return False

    async def get_current_user(self, user_id: int) -> UserResponse:
        """Get user by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)

    async def update_user_profile(self, user_id: int, request: UserUpdateRequest) -> UserResponse:
        """Update user profile."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        update_data = {}
        if request.name is not None:
            update_data["name"] = request.name
        if request.email is not None:
            email = User.normalize_email(request.email)
            if email != user.email:
                if await self.user_repo.is_email_taken(email, exclude_user_id=user.id):
                    raise ConflictError("Email already in use")
                update_data["email"] = email

        if update_data:
            await self.user_repo.update_user(user, update_data)
            await self._commit("update profile")

        return UserResponse.model_validate(user)

    async def change_password(self, user_id: int, request: PasswordChangeRequest) -> bool:
        """Change user password."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(request.old_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        await self.user_repo.update_user(user, {"password_hash": hash_password(request.new_password)})
        await self._commit("change password")
        return True

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            # lost a race on the unique email index
            await self.session.rollback()
            raise ConflictError("User already exists") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action}", exc_info=e)
            raise InternalError(f"Server error while trying to {action}") from e
