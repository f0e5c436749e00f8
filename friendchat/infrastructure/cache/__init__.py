"""
Cache Layer - Redis implementations.

- redis_client.py: async client factory
- cached_message_repository.py: read-through conversation cache decorator
"""

from friendchat.infrastructure.cache.redis_client import (
    create_redis_client,
    close_redis_client,
)
from friendchat.infrastructure.cache.cached_message_repository import (
    CachedMessageRepository,
)

__all__ = [
    "create_redis_client",
    "close_redis_client",
    "CachedMessageRepository",
]
