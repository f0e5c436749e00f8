"""
MongoDB User Repository - friend graph persistence.

Mapping:
- Mongo: _id (ObjectId)        ←→ Domain: id (UserId)
- Mongo: email (str)           ←→ Domain: email (UserEmail)
- Mongo: fullName, profilePic  ←→ Domain: full_name, profile_pic
- Mongo: friends ([ObjectId])  ←→ Domain: friends (list[UserId])

Every read uses SAFE_PROJECTION, so password hashes never leave the database.
"""

import logging
import re
from typing import Any, Optional
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from friendchat.domain.entities.user import User, UserWithFriends
from friendchat.domain.exceptions import PersistenceError
from friendchat.domain.ports.repositories.user_repository import UserRepository
from friendchat.domain.value_objects.user_email import UserEmail
from friendchat.domain.value_objects.user_id import UserId
from friendchat.infrastructure.persistence.mongo_client import USERS_COLLECTION

logger = logging.getLogger(__name__)

SAFE_PROJECTION = {"password": 0}


class MongoUserRepository(UserRepository):
    """MongoDB implementation of UserRepository."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._users = db[USERS_COLLECTION]

    def _to_entity(self, doc: dict[str, Any]) -> User:
        return User(
            id=UserId(str(doc["_id"])),
            email=UserEmail(doc["email"]),
            full_name=doc.get("fullName"),
            profile_pic=doc.get("profilePic"),
            friends=[UserId(str(friend_id)) for friend_id in doc.get("friends", [])],
        )

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        try:
            doc = await self._users.find_one(
                {"_id": ObjectId(user_id.value)}, SAFE_PROJECTION
            )
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load user {user_id}: {e}") from e
        return self._to_entity(doc) if doc else None

    async def get_with_friends(self, user_id: UserId) -> Optional[UserWithFriends]:
        """
        Load a user and resolve its friend ids to user records.

        Friends keep the order of the user's friend list; ids whose document
        no longer exists are skipped.
        """
        user = await self.get_by_id(user_id)
        if not user:
            return None
        if not user.friends:
            return UserWithFriends(user=user, friends=[])

        try:
            cursor = self._users.find(
                {"_id": {"$in": [ObjectId(f.value) for f in user.friends]}},
                SAFE_PROJECTION,
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load friends of {user_id}: {e}") from e

        by_id = {str(doc["_id"]): self._to_entity(doc) for doc in docs}
        friends = [by_id[f.value] for f in user.friends if f.value in by_id]
        return UserWithFriends(user=user, friends=friends)

    async def search_by_email(self, fragment: str, exclude_id: UserId) -> list[User]:
        """Case-insensitive substring match; the fragment is matched literally."""
        try:
            cursor = self._users.find(
                {
                    "email": {"$regex": re.escape(fragment), "$options": "i"},
                    "_id": {"$ne": ObjectId(exclude_id.value)},
                },
                SAFE_PROJECTION,
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PersistenceError(f"User search failed: {e}") from e
        return [self._to_entity(doc) for doc in docs]

    async def append_friend(self, owner_id: UserId, friend_id: UserId) -> None:
        """
        Add friend_id to owner's friend list.

        $addToSet makes a repeated append a no-op, so two concurrent
        opposite-direction friend requests cannot create duplicate entries.
        """
        try:
            result = await self._users.update_one(
                {"_id": ObjectId(owner_id.value)},
                {"$addToSet": {"friends": ObjectId(friend_id.value)}},
            )
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to add {friend_id} to friends of {owner_id}: {e}"
            ) from e
        if result.matched_count == 0:
            raise PersistenceError(f"User {owner_id} disappeared during friend link")
        logger.debug(f"Appended friend {friend_id} to {owner_id}")
