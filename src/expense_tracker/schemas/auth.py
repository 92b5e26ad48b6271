"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from expense_tracker.models.user import UserRole

MIN_PASSWORD_LENGTH = 6

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Password = Annotated[str, Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)]


class UserRegister(BaseModel):
    """Request model for user registration."""

    name: Name = Field(..., description="User's display name")
    email: EmailStr = Field(..., description="User email address")
    password: Password = Field(..., description=f"Password (min {MIN_PASSWORD_LENGTH} characters)")


class LoginRequest(BaseModel):
    """Request model for user login.

    ``email`` is not format-checked: a malformed address is just an unknown one.
    """

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class TokenPair(BaseModel):
    """Access and refresh tokens."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class RefreshRequest(BaseModel):
    """Request model for token refresh."""

    refresh_token: str = Field(..., description="JWT refresh token")


class UserResponse(BaseModel):
    """Response model for user data (without sensitive fields)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    created_at: datetime


class LoginResult(TokenPair):
    """Response model for a successful login."""

    user: UserResponse


class Identity(BaseModel):
    """Authenticated caller derived from a verified access token."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
