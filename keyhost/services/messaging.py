"""
Messaging service for guest/host conversations about properties.
"""

from typing import Any, Dict, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.messaging import ConversationRepository, MessageRepository
from keyhost.repositories.property import PropertyRepository
from keyhost.models.messaging import Conversation, Message
from keyhost.models.user import User
from keyhost.utils.exceptions import (
    BusinessRuleViolationError,
    ForbiddenError,
    NotFoundError,
    PropertyNotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class MessagingService:
    """
    Conversations are keyed by (guest, host, property); starting a second
    conversation about the same property reuses the first one.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.conversation_repo = ConversationRepository(db_session)
        self.message_repo = MessageRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def list_conversations(self, user: User) -> List[Dict[str, Any]]:
        """
        Inbox rows for the user, most recently active first.

        Returns:
            Dicts shaped like ``ConversationSummary``
        """
        conversations = await self.conversation_repo.list_for_user(user.id)
        ids = [conversation.id for conversation in conversations]
        last_messages = await self.message_repo.last_messages(ids)
        unread = await self.message_repo.unread_counts(ids, user.id)

        return [
            {
                "id": conversation.id,
                "property_id": conversation.property_id,
                "property_title": conversation.property_rel.title if conversation.property_rel else None,
                "other_user": conversation.other_party(user.id),
                "last_message": last_messages.get(conversation.id),
                "last_message_at": conversation.last_message_at,
                "unread_count": unread.get(conversation.id, 0),
            }
            for conversation in conversations
        ]

    async def _participant_conversation(self, conversation_id: uuid.UUID, user: User) -> Conversation:
        conversation = await self.conversation_repo.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", str(conversation_id))
        if not conversation.is_participant(user.id):
            raise ForbiddenError("You are not a participant in this conversation")
        return conversation

    async def get_conversation(self, conversation_id: uuid.UUID, user: User) -> Tuple[Conversation, List[Message]]:
        """
        Conversation with its messages in send order. Messages from the other
        party are marked read.

        Raises:
            NotFoundError: If missing or the user is not a participant
        """
        conversation = await self.conversation_repo.get_by_id(conversation_id)
        if conversation is None or not conversation.is_participant(user.id):
            raise NotFoundError("Conversation", str(conversation_id))

        marked = await self.message_repo.mark_read(conversation.id, user.id)
        if marked:
            logger.debug(f"Marked {marked} messages read in {conversation.id}")
        messages = await self.message_repo.list_for_conversation(conversation.id)
        return conversation, messages

    async def start_conversation(self, property_id: uuid.UUID, content: str, guest: User) -> Tuple[Conversation, Message]:
        """
        Message a property's host, opening the thread if needed.

        Raises:
            PropertyNotFoundError: If the property does not exist
            BusinessRuleViolationError: When messaging your own property
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))
        if property_obj.owner_id == guest.id:
            raise BusinessRuleViolationError("own_property", "You cannot message yourself about your own property")

        conversation = await self.conversation_repo.find_thread(guest.id, property_obj.owner_id, property_obj.id)
        if conversation is None:
            conversation = await self.conversation_repo.start(guest.id, property_obj.owner_id, property_obj.id)
            logger.info(f"Conversation {conversation.id} opened by {guest.email} about property {property_obj.id}")

        message = await self.conversation_repo.add_message(conversation, guest.id, content)
        return await self.conversation_repo.get_by_id(conversation.id), message

    async def reply(self, conversation_id: uuid.UUID, content: str, user: User) -> Message:
        """
        Append a message to an existing conversation.

        Raises:
            NotFoundError: If the conversation does not exist
            ForbiddenError: If the user is not a participant
        """
        conversation = await self._participant_conversation(conversation_id, user)
        return await self.conversation_repo.add_message(conversation, user.id, content)
