"""Pydantic models for authentication."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class VerifyEmailRequest(BaseModel):
    """Email verification with a one-time code."""

    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6)


class ResendCodeRequest(BaseModel):
    """Request a fresh verification code."""

    email: EmailStr


class ChangeEmailCodeRequest(BaseModel):
    """Request a code for moving the account to a new address."""

    new_email: EmailStr


class ChangeEmailRequest(BaseModel):
    """Confirm an email change with the code sent to the new address."""

    new_email: EmailStr
    code: str = Field(..., min_length=6, max_length=6)


class UserResponse(BaseModel):
    """User response (public info)."""

    id: int
    name: str
    email: str
    role: str
    is_verified: bool
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
