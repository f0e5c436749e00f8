"""
Messages API Router - conversation history and the send (delivery) path.

Flow (send):
  POST /api/messages/send/{id} → SendMessageCommand → SendMessageHandler
      → upload attachment → MessageRepository.insert → live push (best effort)
  201 ← MessageDTO (the persisted message, same shape as the live push)
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel
from friendchat.application.commands.chat import (
    SendMessageCommand,
    SendMessageHandler,
)
from friendchat.application.queries.chat import (
    GetConversationQuery,
    GetConversationHandler,
)
from friendchat.application.dto.message import MessageDTO
from friendchat.domain.exceptions import DomainValidationError, UpstreamError
from friendchat.domain.value_objects.attachment import AttachmentPayload
from friendchat.domain.value_objects.user_id import UserId
from friendchat.presentation.api.rate_limit import limiter, send_rate_limit
from friendchat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST MODELS ====================


class FileRequest(BaseModel):
    data: str
    type: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None


class SendMessageRequest(BaseModel):
    """
    Request body for sending a message.

    {"text": "hi", "file": {"data": "data:image/png;base64,...", "type": "image",
                            "name": "cat.png", "size": 1234}}
    Both fields are optional; at least one must carry content.
    """

    text: Optional[str] = None
    file: Optional[FileRequest] = None


# ==================== ROUTER ====================

router = APIRouter(prefix="/api/messages", tags=["messages"])


def _parse_user_id(raw: str) -> UserId:
    try:
        return UserId(raw)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# ==================== ENDPOINTS ====================


@router.get("/{user_to_chat_id}", response_model=list[MessageDTO], response_model_by_alias=True)
@inject
async def get_conversation(
    user_to_chat_id: str,
    handler: FromDishka[GetConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """All messages between the caller and another user, oldest first."""
    other_user_id = _parse_user_id(user_to_chat_id)
    try:
        messages = await handler.execute(
            GetConversationQuery(user_id=current_user.id, other_user_id=other_user_id)
        )
    except UpstreamError as e:
        logger.error(f"Get conversation failed: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return [MessageDTO.from_entity(message) for message in messages]


@router.post(
    "/send/{receiver_id}",
    response_model=MessageDTO,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(send_rate_limit)
@inject
async def send_message(
    request: Request,
    receiver_id: str,
    body: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Persist a message, then push it to the receiver if they are online.

    A failed live push never changes the response: the message is stored.
    """
    receiver = _parse_user_id(receiver_id)

    attachment = None
    if body.file is not None:
        try:
            attachment = AttachmentPayload(
                data=body.file.data,
                type=body.file.type,
                name=body.file.name,
                size=body.file.size,
            )
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
            ) from e

    try:
        message = await handler.execute(
            SendMessageCommand(
                sender_id=current_user.id,
                receiver_id=receiver,
                text=body.text,
                attachment=attachment,
            )
        )
    except DomainValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UpstreamError as e:
        logger.error(f"Send message failed: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return MessageDTO.from_entity(message)
