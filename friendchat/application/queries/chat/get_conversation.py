"""
GetConversation Query - All messages between the current user and another user.

Pull-based counterpart of the live push: anything the receiver missed while
offline (or during a connect race) shows up here.

Maps from: GET /:id
"""

from dataclasses import dataclass

from friendchat.application.common.interfaces import Query, QueryHandler
from friendchat.domain.entities.message import Message
from friendchat.domain.ports.repositories import MessageRepository
from friendchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetConversationQuery(Query[list[Message]]):
    user_id: UserId
    other_user_id: UserId


class GetConversationHandler(QueryHandler[list[Message]]):
    def __init__(self, msg_repo: MessageRepository):
        self._msg_repo = msg_repo

    async def execute(self, query: GetConversationQuery) -> list[Message]:
        """Messages in both directions, oldest first (store insertion order)."""
        return await self._msg_repo.find_conversation(
            query.user_id, query.other_user_id
        )
