from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from notes_api.core.schemas.auth import AuthUser  # noqa: TCH001
from notes_api.utils.validation import PASSWORD_MIN_LENGTH


class RegisterRequest(BaseModel):
    """Request to register with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, description="User's password")


class LoginRequest(BaseModel):
    """Request to log in with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class UserRead(BaseModel):
    id: str
    email: str


class SessionRead(BaseModel):
    """Session issued by the auth provider."""

    access_token: str = Field(..., description="JWT access token for API calls")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    refresh_token: str | None = Field(default=None, description="Refresh token for token renewal")
    user: UserRead


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserRead


class LoginResponse(BaseModel):
    message: str = "Login successful"
    session: SessionRead


class ProfileResponse(BaseModel):
    user: AuthUser
