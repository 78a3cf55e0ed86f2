"""
Pydantic schemas for guest/host conversations.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from keyhost.schemas.user import UserSummary


class StartConversationRequest(BaseModel):
    property_id: UUID
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class ReplyRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(BaseModel):
    """Inbox row."""

    id: UUID
    property_id: Optional[UUID] = None
    property_title: Optional[str] = None
    other_user: UserSummary
    last_message: Optional[str] = None
    last_message_at: datetime
    unread_count: int = 0


class ConversationDetail(BaseModel):
    id: UUID
    guest_id: UUID
    host_id: UUID
    property_id: Optional[UUID] = None
    property_title: Optional[str] = None
    other_user: UserSummary
    last_message_at: datetime
    messages: List[MessageResponse]
