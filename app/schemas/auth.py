"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str = Field(min_length=1)


class Token(BaseModel):
    """Schema for JWT token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: datetime


class TokenRefresh(BaseModel):
    """Schema for refresh token request."""

    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: str | None = None


class SessionResponse(BaseModel):
    """The caller's resolved session."""

    user_id: str
    email: str
    roles: list[str]
    is_admin: bool
    expires_at: datetime
