"""
Authentication and user profile schemas.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field, field_validator

from .common import APIModel

_SPECIAL_CHARS = re.compile(r"[!@#$%^&*]")


def validate_password_strength(password: str) -> str:
    """At least 8 characters with an uppercase letter, a digit and a special character."""
    password = password.strip()
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", password):
        raise ValueError("Password must contain at least one number")
    if not _SPECIAL_CHARS.search(password):
        raise ValueError("Password must contain at least one special character")
    return password


def _clean_name(name: str) -> str:
    name = name.strip()
    if len(name) < 2:
        raise ValueError("Name must be at least 2 characters")
    return name


class RegisterRequest(APIModel):
    """User registration request schema."""

    name: str = Field(max_length=100, description="Display name")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(max_length=128, description="Account password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_password_strength(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "Password123!",
            }
        }
    )


class LoginRequest(APIModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=128, description="Account password")


class UserResponse(APIModel):
    """User information response schema."""

    id: int = Field(description="User identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    created_at: datetime = Field(description="Account creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")


class TokenResponse(APIModel):
    """Login response: the token (also set as a cookie) and the user."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserResponse = Field(description="User information")


class UserUpdateRequest(APIModel):
    """Profile update; omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, max_length=100, description="Display name")
    email: Optional[EmailStr] = Field(default=None, description="Email address")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v) if v is not None else v


class PasswordChangeRequest(APIModel):
    """Password change request schema."""

    old_password: str = Field(min_length=1, description="Current password")
    new_password: str = Field(max_length=128, description="New password")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return validate_password_strength(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "oldPassword": "Password123!",
                "newPassword": "N3wPassword!",
            }
        }
    )
