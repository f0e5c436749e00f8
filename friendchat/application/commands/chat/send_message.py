"""
SendMessage Command - Persist a direct message, then push it live if the
receiver is online.

Handler (the delivery path):
1. Validate content (text or attachment, when REQUIRE_MESSAGE_CONTENT)
2. Upload attachment (optional) → abort with AttachmentUploadError on failure
3. Compose Message
4. Persist via MessageRepository.insert → abort with PersistenceError on failure
5. Presence lookup for receiver → push "newMessage" with the PERSISTED message
   (best effort: failures are logged and absorbed, never surfaced)
6. Return the persisted message

Ordering:
    The presence lookup only ever happens after the insert returned. A receiver
    who connects mid-send may miss the push; they still get the message from
    conversation history.

Maps from: POST /send/:id
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from friendchat.application.common.interfaces import Command, CommandHandler
from friendchat.application.dto.message import MessageDTO
from friendchat.config.settings import Config
from friendchat.domain.entities.message import Message
from friendchat.domain.exceptions import (
    AttachmentUploadError,
    DomainValidationError,
    PersistenceError,
)
from friendchat.domain.ports.attachment_uploader import AttachmentUploader
from friendchat.domain.ports.presence import NEW_MESSAGE_EVENT, PresenceRegistry
from friendchat.domain.ports.repositories.message_repository import MessageRepository
from friendchat.domain.value_objects.attachment import Attachment, AttachmentPayload
from friendchat.domain.value_objects.user_id import UserId
from friendchat.observability import (
    MetricsErrorType,
    PushOutcome,
    increment_error,
    increment_live_push,
    increment_messages_sent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessageCommand(Command[Message]):
    sender_id: UserId
    receiver_id: UserId
    text: Optional[str] = None
    attachment: Optional[AttachmentPayload] = None


class SendMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        msg_repo: MessageRepository,
        presence: PresenceRegistry,
        uploader: AttachmentUploader,
        push_timeout: float = Config.LIVE_PUSH_TIMEOUT_SECONDS,
        require_content: bool = Config.REQUIRE_MESSAGE_CONTENT,
    ):
        self._msg_repo = msg_repo
        self._presence = presence
        self._uploader = uploader
        self._push_timeout = push_timeout
        self._require_content = require_content

    async def execute(self, command: SendMessageCommand) -> Message:
        text = command.text if command.text and command.text.strip() else None
        if self._require_content and text is None and command.attachment is None:
            raise DomainValidationError("Message must contain text or a file")

        file = None
        if command.attachment is not None:
            file = await self._upload(command.attachment)

        draft = Message.compose(
            sender_id=command.sender_id,
            receiver_id=command.receiver_id,
            text=text,
            file=file,
        )
        message = await self._persist(draft)
        increment_messages_sent(has_attachment=file is not None)

        outcome = await self._push_live(message)
        increment_live_push(outcome)
        logger.info(
            f"Message {message.id} {message.sender_id} -> {message.receiver_id} "
            f"stored, live push: {outcome}"
        )
        return message

    async def _upload(self, payload: AttachmentPayload) -> Attachment:
        try:
            return await self._uploader.upload(payload)
        except (AttachmentUploadError, DomainValidationError):
            increment_error(MetricsErrorType.UPLOAD_FAILED)
            raise
        except Exception as e:
            increment_error(MetricsErrorType.UPLOAD_FAILED)
            raise AttachmentUploadError(f"Attachment upload failed: {e}") from e

    async def _persist(self, draft: Message) -> Message:
        # Shielded: a client disconnect must not abandon a write in flight
        try:
            return await asyncio.shield(self._msg_repo.insert(draft))
        except PersistenceError:
            increment_error(MetricsErrorType.PERSISTENCE_FAILED)
            raise
        except Exception as e:
            increment_error(MetricsErrorType.PERSISTENCE_FAILED)
            raise PersistenceError(f"Failed to store message: {e}") from e

    async def _push_live(self, message: Message) -> str:
        session = self._presence.lookup(message.receiver_id)
        if session is None:
            return PushOutcome.OFFLINE

        payload = MessageDTO.from_entity(message).to_wire()
        try:
            await asyncio.wait_for(
                session.send_event(NEW_MESSAGE_EVENT, payload),
                timeout=self._push_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Live push of message {message.id} to {message.receiver_id} "
                f"timed out after {self._push_timeout}s"
            )
            return PushOutcome.FAILED
        except Exception as e:
            logger.warning(
                f"Live push of message {message.id} to {message.receiver_id} failed: {e}"
            )
            return PushOutcome.FAILED
        return PushOutcome.DELIVERED
