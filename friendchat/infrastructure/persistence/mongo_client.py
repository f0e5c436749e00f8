"""
MongoDB client factory and index setup.

Collections (field names follow the documents written by the web client):
    users:    {_id, email, fullName, profilePic, password, friends: [ObjectId]}
    messages: {_id, senderId, receiverId, text, file: {url, type, name, size},
               createdAt, updatedAt}
"""

import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from friendchat.config.settings import Config

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
MESSAGES_COLLECTION = "messages"


def create_mongo_client() -> AsyncIOMotorClient:
    """
    Create the motor client (lazy: no I/O until the first operation).

    tz_aware=True so timestamps read back as UTC-aware datetimes, matching
    what the repositories write.
    """
    client = AsyncIOMotorClient(
        Config.MONGO_URI,
        serverSelectionTimeoutMS=Config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        tz_aware=True,
    )
    logger.info(f"[Mongo] Client created for database {Config.MONGO_DB}")
    return client


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the repositories rely on (idempotent)."""
    await db[USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True)
    await db[MESSAGES_COLLECTION].create_index(
        [("senderId", ASCENDING), ("receiverId", ASCENDING), ("_id", ASCENDING)]
    )
    logger.info("[Mongo] Indexes ensured")
