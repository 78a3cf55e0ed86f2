"""
Conversation and Message models for guest/host messaging.
"""

from sqlalchemy import Text, Boolean, DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from keyhost.database import Base
from datetime import datetime
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from keyhost.models.user import User
    from keyhost.models.property import Property


class Conversation(Base):
    """
    A thread between one guest and one host, optionally about a property.
    Deleting either user removes the conversation; deleting the property
    only detaches it.
    """

    __tablename__ = "conversations"

    guest_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    host_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    guest: Mapped["User"] = relationship("User", foreign_keys=[guest_id], lazy="selectin")
    host: Mapped["User"] = relationship("User", foreign_keys=[host_id], lazy="selectin")
    property_rel: Mapped[Optional["Property"]] = relationship("Property", lazy="selectin")

    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
        order_by="Message.created_at"
    )

    def is_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in (self.guest_id, self.host_id)

    def other_party(self, user_id: uuid.UUID) -> "User":
        return self.host if user_id == self.guest_id else self.guest


class Message(Base):
    """A single message inside a conversation."""

    __tablename__ = "messages"

    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    conversation: Mapped["Conversation"] = relationship(
        "Conversation",
        back_populates="messages",
        lazy="noload"
    )
    sender: Mapped["User"] = relationship("User", lazy="selectin")


conversation_participants_index = Index(
    'idx_conversations_participants',
    Conversation.guest_id,
    Conversation.host_id,
    Conversation.property_id
)
