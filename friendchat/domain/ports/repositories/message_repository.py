"""
Message Repository Port - Interface for message persistence.
Implementation: friendchat/infrastructure/persistence/mongo_message_repository.py
"""

from abc import ABC, abstractmethod

from friendchat.domain.entities.message import Message
from friendchat.domain.value_objects.user_id import UserId


class MessageRepository(ABC):
    @abstractmethod
    async def insert(self, message: Message) -> Message:
        """Persist a composed message; returns it with id and timestamps assigned."""
        ...

    @abstractmethod
    async def find_conversation(
        self, user_a: UserId, user_b: UserId
    ) -> list[Message]:
        """All messages exchanged between the two users, oldest first."""
        ...
