"""
Messaging endpoints between guests and hosts.
"""

from fastapi import APIRouter, Depends, Path, status
from typing import List
from uuid import UUID

from keyhost.models.user import User
from keyhost.services.messaging import MessagingService
from keyhost.schemas.common import ApiResponse
from keyhost.schemas.messaging import (
    ConversationDetail,
    ConversationSummary,
    MessageResponse,
    ReplyRequest,
    StartConversationRequest,
)
from keyhost.schemas.user import UserSummary
from keyhost.utils.dependencies import get_current_user, get_messaging_service
from keyhost.utils.responses import success_response


router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get(
    "/conversations",
    response_model=ApiResponse[List[ConversationSummary]],
    summary="Your inbox"
)
async def list_conversations(
    current_user: User = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
):
    rows = await messaging_service.list_conversations(current_user)
    return success_response(
        data=[
            ConversationSummary(**{**row, "other_user": UserSummary.model_validate(row["other_user"])})
            for row in rows
        ],
        message="Conversations retrieved successfully"
    )


@router.get(
    "/conversations/{conversation_id}",
    response_model=ApiResponse[ConversationDetail],
    summary="Read a conversation"
)
async def get_conversation(
    conversation_id: UUID = Path(...),
    current_user: User = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
):
    conversation, messages = await messaging_service.get_conversation(conversation_id, current_user)
    return success_response(
        data=ConversationDetail(
            id=conversation.id,
            guest_id=conversation.guest_id,
            host_id=conversation.host_id,
            property_id=conversation.property_id,
            property_title=conversation.property_rel.title if conversation.property_rel else None,
            other_user=UserSummary.model_validate(conversation.other_party(current_user.id)),
            last_message_at=conversation.last_message_at,
            messages=[MessageResponse.model_validate(m) for m in messages],
        ),
        message="Conversation retrieved successfully"
    )


@router.post(
    "/start",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Message a host about a property"
)
async def start_conversation(
    data: StartConversationRequest,
    current_user: User = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
):
    conversation, message = await messaging_service.start_conversation(
        data.property_id, data.message, current_user
    )
    return success_response(
        data=MessageResponse.model_validate(message),
        message="Message sent"
    )


@router.post(
    "/conversations/{conversation_id}/reply",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Reply in a conversation"
)
async def reply(
    data: ReplyRequest,
    conversation_id: UUID = Path(...),
    current_user: User = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service)
):
    message = await messaging_service.reply(conversation_id, data.message, current_user)
    return success_response(
        data=MessageResponse.model_validate(message),
        message="Message sent"
    )
