"""
Conversation and message repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_
from keyhost.repositories.base import BaseRepository
from keyhost.models.messaging import Conversation, Message
from datetime import datetime, timezone
from typing import Dict, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class ConversationRepository(BaseRepository[Conversation]):
    """
    Repository for guest/host conversations.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    async def find_thread(
        self,
        guest_id: uuid.UUID,
        host_id: uuid.UUID,
        property_id: Optional[uuid.UUID],
    ) -> Optional[Conversation]:
        """Existing conversation for this guest, host and property."""
        query = select(Conversation).where(
            Conversation.guest_id == guest_id,
            Conversation.host_id == host_id,
            Conversation.property_id == property_id,
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def list_for_user(self, user_id: uuid.UUID) -> List[Conversation]:
        """Conversations where the user is guest or host, most recent first."""
        query = (
            select(Conversation)
            .where(or_(Conversation.guest_id == user_id, Conversation.host_id == user_id))
            .order_by(Conversation.last_message_at.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add_message(
        self,
        conversation: Conversation,
        sender_id: uuid.UUID,
        content: str,
    ) -> Message:
        """
        Append a message and bump the conversation's last_message_at.

        Raises:
            Exception: If database operation fails
        """
        try:
            # Stamped here rather than by the server so messages sent within
            # the same second still sort in send order
            sent_at = datetime.now(timezone.utc)
            message = Message(
                conversation_id=conversation.id,
                sender_id=sender_id,
                content=content,
                created_at=sent_at,
            )
            self.db.add(message)
            conversation.last_message_at = sent_at
            await self.db.commit()
            await self.db.refresh(message)
            logger.debug(f"Added message {message.id} to conversation {conversation.id}")
            return message
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add message to conversation {conversation.id}: {e}")
            raise

    async def start(
        self,
        guest_id: uuid.UUID,
        host_id: uuid.UUID,
        property_id: Optional[uuid.UUID],
    ) -> Conversation:
        """Create a new, empty conversation."""
        return await self.create({
            "guest_id": guest_id,
            "host_id": host_id,
            "property_id": property_id,
        })


class MessageRepository(BaseRepository[Message]):
    """
    Repository for messages inside conversations.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def list_for_conversation(self, conversation_id: uuid.UUID) -> List[Message]:
        """Messages in chronological order."""
        query = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def mark_read(self, conversation_id: uuid.UUID, reader_id: uuid.UUID) -> int:
        """
        Mark the other party's unread messages as read.

        Returns:
            Number of messages updated
        """
        try:
            stmt = (
                update(Message)
                .where(
                    Message.conversation_id == conversation_id,
                    Message.sender_id != reader_id,
                    Message.is_read.is_(False),
                )
                .values(is_read=True)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to mark messages read in {conversation_id}: {e}")
            raise

    async def last_messages(self, conversation_ids: List[uuid.UUID]) -> Dict[uuid.UUID, str]:
        """Latest message text per conversation."""
        if not conversation_ids:
            return {}
        query = (
            select(Message.conversation_id, Message.content)
            .where(Message.conversation_id.in_(conversation_ids))
            .order_by(Message.conversation_id, Message.created_at.desc())
        )
        latest: Dict[uuid.UUID, str] = {}
        for conversation_id, content in (await self.db.execute(query)).all():
            latest.setdefault(conversation_id, content)
        return latest

    async def unread_counts(self, conversation_ids: List[uuid.UUID], reader_id: uuid.UUID) -> Dict[uuid.UUID, int]:
        """Unread messages from the other party, per conversation."""
        if not conversation_ids:
            return {}
        query = (
            select(Message.conversation_id, func.count(Message.id))
            .where(
                Message.conversation_id.in_(conversation_ids),
                Message.sender_id != reader_id,
                Message.is_read.is_(False),
            )
            .group_by(Message.conversation_id)
        )
        return {conversation_id: count for conversation_id, count in (await self.db.execute(query)).all()}
