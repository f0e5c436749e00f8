"""
Presence Ports - Who is online, and how to reach them.

SessionHandle:     one live connection of an online user
PresenceRegistry:  user id → current SessionHandle (read side only; the
                   connection layer owns connect/disconnect)
Implementation: friendchat/infrastructure/realtime/connection_registry.py
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from friendchat.domain.value_objects.user_id import UserId

NEW_MESSAGE_EVENT = "newMessage"


class SessionHandle(ABC):
    @abstractmethod
    async def send_event(self, event: str, payload: Any) -> None:
        """
        Push a tagged event to the connected client.

        Raises:
            PresenceDeliveryError: if the connection cannot take the event
        """
        ...


class PresenceRegistry(ABC):
    @abstractmethod
    def lookup(self, user_id: UserId) -> Optional[SessionHandle]: ...
