"""
Pydantic schemas for user profiles.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from keyhost.models.user import UserType


class UserSummary(BaseModel):
    """Public card for a host or guest."""

    id: UUID
    first_name: str
    last_name: str
    is_superhost: bool = False

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Full user profile as seen by the user or an admin."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    user_type: UserType
    is_active: bool
    bio: Optional[str] = None
    work: Optional[str] = None
    school: Optional[str] = None
    is_superhost: bool = False
    languages: List[str] = Field(default_factory=list)
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("languages", mode="before")
    @classmethod
    def default_languages(cls, v):
        return v or []


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    bio: Optional[str] = Field(None, max_length=5000)
    work: Optional[str] = Field(None, max_length=255)
    school: Optional[str] = Field(None, max_length=255)
    languages: Optional[List[str]] = Field(None, examples=[["English", "Bengali"]])


class UserStatusUpdate(BaseModel):
    """Admin activation toggle."""

    is_active: bool
