"""
Persistence Layer - Database implementations.

Contains MongoDB (motor) repository implementations for domain ports.
"""

from friendchat.infrastructure.persistence.mongo_client import (
    create_mongo_client,
    ensure_indexes,
)
from friendchat.infrastructure.persistence.mongo_user_repository import (
    MongoUserRepository,
)
from friendchat.infrastructure.persistence.mongo_message_repository import (
    MongoMessageRepository,
)

__all__ = [
    "create_mongo_client",
    "ensure_indexes",
    "MongoUserRepository",
    "MongoMessageRepository",
]
