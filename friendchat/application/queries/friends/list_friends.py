"""
ListFriends Query - The current user's friends, resolved to full user records.

Maps from: GET /users (sidebar)
"""

from dataclasses import dataclass

from friendchat.application.common.interfaces import Query, QueryHandler
from friendchat.domain.entities.user import User
from friendchat.domain.exceptions import EntityNotFoundError
from friendchat.domain.ports.repositories import UserRepository
from friendchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListFriendsQuery(Query[list[User]]):
    user_id: UserId


class ListFriendsHandler(QueryHandler[list[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: ListFriendsQuery) -> list[User]:
        """
        Raises:
            EntityNotFoundError: If the current user's record is missing
        """
        result = await self._user_repository.get_with_friends(query.user_id)
        if not result:
            raise EntityNotFoundError("User not found")
        return result.friends
