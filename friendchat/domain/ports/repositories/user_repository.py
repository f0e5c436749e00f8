"""
User Repository Port - Friend graph persistence.
Implementation: friendchat/infrastructure/persistence/mongo_user_repository.py
"""

from abc import ABC, abstractmethod
from typing import Optional
from friendchat.domain.entities.user import User, UserWithFriends
from friendchat.domain.value_objects.user_id import UserId


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def get_with_friends(self, user_id: UserId) -> Optional[UserWithFriends]: ...

    @abstractmethod
    async def search_by_email(
        self, fragment: str, exclude_id: UserId
    ) -> list[User]: ...

    @abstractmethod
    async def append_friend(self, owner_id: UserId, friend_id: UserId) -> None: ...
