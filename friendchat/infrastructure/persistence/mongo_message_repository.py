"""
MongoDB Message Repository Implementation.

Mongo document:
    {
        _id:        ObjectId,
        senderId:   ObjectId,
        receiverId: ObjectId,
        text:       str | null,
        file:       {url, type, name, size} | null,
        createdAt:  datetime,
        updatedAt:  datetime,
    }

Mapping:
- Mongo: _id (ObjectId)                 ←→ Domain: id (MessageId)
- Mongo: senderId / receiverId          ←→ Domain: sender_id / receiver_id (UserId)
- Mongo: file (embedded document)       ←→ Domain: file (Attachment)

Identity and timestamps are assigned here, at insert time.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from friendchat.domain.entities.message import Message
from friendchat.domain.exceptions import PersistenceError
from friendchat.domain.ports.repositories.message_repository import MessageRepository
from friendchat.domain.value_objects.attachment import Attachment
from friendchat.domain.value_objects.message_id import MessageId
from friendchat.domain.value_objects.user_id import UserId
from friendchat.infrastructure.persistence.mongo_client import MESSAGES_COLLECTION

logger = logging.getLogger(__name__)


def _utc_now_ms() -> datetime:
    # BSON dates keep milliseconds; truncate so the returned message equals a re-read
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoMessageRepository(MessageRepository):
    """MongoDB implementation of MessageRepository."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._messages = db[MESSAGES_COLLECTION]

    def _to_entity(self, doc: dict[str, Any]) -> Message:
        file_doc = doc.get("file")
        file = None
        if file_doc and file_doc.get("url"):
            file = Attachment(
                url=file_doc["url"],
                type=file_doc.get("type"),
                name=file_doc.get("name"),
                size=file_doc.get("size"),
            )
        return Message(
            id=MessageId(str(doc["_id"])),
            sender_id=UserId(str(doc["senderId"])),
            receiver_id=UserId(str(doc["receiverId"])),
            text=doc.get("text"),
            file=file,
            created_at=doc["createdAt"],
            updated_at=doc.get("updatedAt"),
        )

    def _to_document(self, message: Message, now: datetime) -> dict[str, Any]:
        file_doc = None
        if message.file:
            file_doc = {
                "url": message.file.url,
                "type": message.file.type,
                "name": message.file.name,
                "size": message.file.size,
            }
        return {
            "senderId": ObjectId(message.sender_id.value),
            "receiverId": ObjectId(message.receiver_id.value),
            "text": message.text,
            "file": file_doc,
            "createdAt": now,
            "updatedAt": now,
        }

    async def insert(self, message: Message) -> Message:
        if message.is_persisted:
            raise ValueError(f"Message {message.id} is already stored")

        now = _utc_now_ms()
        try:
            result = await self._messages.insert_one(self._to_document(message, now))
        except PyMongoError as e:
            raise PersistenceError(f"Failed to store message: {e}") from e

        return message.persisted(MessageId(str(result.inserted_id)), now)

    async def find_conversation(self, user_a: UserId, user_b: UserId) -> list[Message]:
        """
        Both directions of the conversation, in insertion order (sorted on _id).
        """
        a, b = ObjectId(user_a.value), ObjectId(user_b.value)
        try:
            cursor = self._messages.find(
                {
                    "$or": [
                        {"senderId": a, "receiverId": b},
                        {"senderId": b, "receiverId": a},
                    ]
                }
            ).sort("_id", ASCENDING)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to load conversation {user_a} <-> {user_b}: {e}"
            ) from e
        return [self._to_entity(doc) for doc in docs]
