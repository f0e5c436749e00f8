"""
Cached Message Repository - Decorator pattern for Redis caching.

- Implements MessageRepository interface (same as MongoMessageRepository)
- Wraps underlying repository with Redis caching layer
- Transparent to callers - they don't know caching exists

Architecture:
    CachedMessageRepository (decorator)
        ↓ wraps
    MongoMessageRepository (concrete implementation)
        ↓ implements
    MessageRepository (abstract interface)

Cache Strategy:
- Read-Through: Check cache first, fallback to DB, populate cache
- Write-Invalidate: Write to DB first, then bump the conversation version and
  delete the conversation key so the next read repopulates it (never appends
  to a key that may be half-built)
- Guarded fill: a miss reads the version before going to the DB, then writes
  delete+rpush+expire in one MULTI under WATCH on the version key. A fill that
  raced an insert (version changed) is dropped instead of caching stale history
- TTL-based expiration as a safety net

Redis Data Structure (LIST):
- Key pattern: "conv:{smaller_user_id}:{larger_user_id}:msgs" (same key for
  both directions of a conversation)
- Each element: JSON string for ONE message
- Version key: "conv:{smaller_user_id}:{larger_user_id}:ver" (INCR on insert)
- Order: Position 0 = oldest, Position N = newest (chronological)
- TTL: Config.REDIS_CACHE_TTL
- Conversations longer than Config.REDIS_CACHE_MAX_MESSAGES are not cached

Error Handling:
- Cache failures never fail the operation: log a warning, fall back to the DB
"""

import json
import logging
from datetime import datetime
from typing import Optional
from redis.asyncio import Redis
from redis.exceptions import WatchError
from friendchat.config.settings import Config
from friendchat.domain.entities.message import Message
from friendchat.domain.ports.repositories.message_repository import MessageRepository
from friendchat.domain.value_objects.attachment import Attachment
from friendchat.domain.value_objects.message_id import MessageId
from friendchat.domain.value_objects.user_id import UserId
from friendchat.observability import MetricsErrorType, increment_error

logger = logging.getLogger(__name__)


class CachedMessageRepository(MessageRepository):
    """
    Decorator: adds Redis caching to MessageRepository.
    """

    def __init__(
        self,
        repo: MessageRepository,
        redis: Redis,
        ttl: int = Config.REDIS_CACHE_TTL,
        max_messages: int = Config.REDIS_CACHE_MAX_MESSAGES,
    ):
        self._repo = repo
        self._redis = redis
        self._ttl = ttl
        self._max_messages = max_messages

    def _cache_key(self, user_a: UserId, user_b: UserId) -> str:
        first, second = sorted((user_a.value, user_b.value))
        return f"conv:{first}:{second}:msgs"

    def _version_key(self, user_a: UserId, user_b: UserId) -> str:
        first, second = sorted((user_a.value, user_b.value))
        return f"conv:{first}:{second}:ver"

    def _serialize_message(self, message: Message) -> str:
        file = None
        if message.file:
            file = {
                "url": message.file.url,
                "type": message.file.type,
                "name": message.file.name,
                "size": message.file.size,
            }
        return json.dumps(
            {
                "id": message.id.value,
                "sender_id": message.sender_id.value,
                "receiver_id": message.receiver_id.value,
                "text": message.text,
                "file": file,
                "created_at": message.created_at.isoformat(),
                "updated_at": (
                    message.updated_at.isoformat() if message.updated_at else None
                ),
            }
        )

    def _deserialize_message(self, json_str: str) -> Message:
        d = json.loads(json_str)
        file: Optional[Attachment] = Attachment(**d["file"]) if d.get("file") else None
        return Message(
            id=MessageId(d["id"]),
            sender_id=UserId(d["sender_id"]),
            receiver_id=UserId(d["receiver_id"]),
            text=d.get("text"),
            file=file,
            created_at=datetime.fromisoformat(d["created_at"]),
            updated_at=(
                datetime.fromisoformat(d["updated_at"]) if d.get("updated_at") else None
            ),
        )

    async def insert(self, message: Message) -> Message:
        """Write to DB (source of truth), then invalidate the conversation key."""
        stored = await self._repo.insert(message)

        cache_key = self._cache_key(stored.sender_id, stored.receiver_id)
        version_key = self._version_key(stored.sender_id, stored.receiver_id)
        try:
            pipe = self._redis.pipeline()
            pipe.incr(version_key)
            pipe.expire(version_key, self._ttl)
            pipe.delete(cache_key)
            await pipe.execute()
            logger.debug(f"Cache INVALIDATED for {cache_key}")
        except Exception as e:
            increment_error(MetricsErrorType.CACHE_FAILED)
            logger.warning(f"Redis cache invalidation error for {cache_key}: {str(e)}")

        return stored

    async def find_conversation(self, user_a: UserId, user_b: UserId) -> list[Message]:
        cache_key = self._cache_key(user_a, user_b)
        version_key = self._version_key(user_a, user_b)

        # 1. Try cache first (fast path)
        version = None
        cache_available = True
        try:
            cached_json_list = await self._redis.lrange(cache_key, 0, -1)
            if cached_json_list:
                logger.debug(f"Cache HIT for {cache_key}")
                return [self._deserialize_message(s) for s in cached_json_list]
            version = await self._redis.get(version_key)
        except Exception as e:
            cache_available = False
            increment_error(MetricsErrorType.CACHE_FAILED)
            logger.warning(f"Redis cache read error for {cache_key}: {str(e)}")

        # 2. Cache miss - fetch from DB
        logger.debug(f"Cache MISS for {cache_key}")
        messages = await self._repo.find_conversation(user_a, user_b)

        # 3. Populate cache (best effort)
        if not cache_available or not messages or len(messages) > self._max_messages:
            return messages
        try:
            await self._populate(cache_key, version_key, version, messages)
        except Exception as e:
            increment_error(MetricsErrorType.CACHE_FAILED)
            logger.warning(f"Redis cache write error for {cache_key}: {str(e)}")

        return messages

    async def _populate(
        self,
        cache_key: str,
        version_key: str,
        version: Optional[str],
        messages: list[Message],
    ) -> None:
        """
        Replace the cached list in one transaction, unless an insert bumped the
        conversation version since `version` was read.
        """
        async with self._redis.pipeline(transaction=True) as pipe:
            await pipe.watch(version_key)
            if await pipe.get(version_key) != version:
                logger.debug(f"Cache fill SKIPPED for {cache_key}: insert in between")
                return
            pipe.multi()
            pipe.delete(cache_key)
            pipe.rpush(cache_key, *[self._serialize_message(m) for m in messages])
            pipe.expire(cache_key, self._ttl)
            try:
                await pipe.execute()
            except WatchError:
                logger.debug(f"Cache fill SKIPPED for {cache_key}: insert in between")
                return
        logger.debug(f"Cache POPULATED for {cache_key}")
