"""
Pydantic schemas for registration, login and token refresh.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from keyhost.models.user import UserType
from keyhost.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Self-service sign-up for guests and property owners."""

    email: EmailStr = Field(..., examples=["guest@example.com"])
    password: str = Field(..., min_length=8, max_length=128, description="At least 8 characters")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    user_type: UserType = Field(UserType.GUEST, description="guest or property_owner")

    @field_validator("user_type")
    @classmethod
    def no_admin_signup(cls, v):
        """Admins are created from the command line only."""
        if v == UserType.ADMIN:
            raise ValueError("Cannot register as admin")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., examples=["owner@example.com"])
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Refresh token issued at login")


class AuthResponse(BaseModel):
    """Tokens plus the authenticated user."""

    user: UserResponse
    token: str = Field(..., description="Bearer access token")
    refresh_token: str
    token_type: str = "bearer"
