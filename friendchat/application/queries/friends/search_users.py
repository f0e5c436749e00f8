"""
SearchUsers Query - Find users by a fragment of their email.

Matching is case-insensitive substring; the requester is never part of the
result. Order is whatever the store returns.

Maps from: GET /search?email=
"""

from dataclasses import dataclass
from typing import Optional

from friendchat.application.common.interfaces import Query, QueryHandler
from friendchat.domain.entities.user import User
from friendchat.domain.exceptions import DomainValidationError
from friendchat.domain.ports.repositories import UserRepository
from friendchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class SearchUsersQuery(Query[list[User]]):
    requester_id: UserId
    email_fragment: Optional[str]


class SearchUsersHandler(QueryHandler[list[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: SearchUsersQuery) -> list[User]:
        fragment = (query.email_fragment or "").strip()
        if not fragment:
            raise DomainValidationError("Email is required for search")
        return await self._user_repository.search_by_email(
            fragment, exclude_id=query.requester_id
        )
