"""
ConnectionRegistry - In-process presence registry backed by WebSocket sessions.

    user id ──► WebSocketSession ──► starlette WebSocket

Writes (connect / disconnect) come from the realtime endpoint and are
serialized by an asyncio.Lock. Reads (lookup) are plain dict reads: the
dispatcher may see a session that is about to close, in which case the push
fails and is absorbed.

One session per user: a new connection replaces the previous one, and a
disconnect only removes the entry if it still points at that connection.
"""

import asyncio
import logging
from typing import Any, Optional

from starlette.websockets import WebSocket, WebSocketState

from friendchat.domain.exceptions import PresenceDeliveryError
from friendchat.domain.ports.presence import PresenceRegistry, SessionHandle
from friendchat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class WebSocketSession(SessionHandle):
    """SessionHandle over a starlette WebSocket; frames are {"event", "data"}."""

    def __init__(self, user_id: UserId, websocket: WebSocket):
        self.user_id = user_id
        self.websocket = websocket
        self._send_lock = asyncio.Lock()

    async def send_event(self, event: str, payload: Any) -> None:
        if self.websocket.application_state != WebSocketState.CONNECTED:
            raise PresenceDeliveryError(f"Session of {self.user_id} is closed")
        try:
            # Concurrent sends on one socket would interleave frames
            async with self._send_lock:
                await self.websocket.send_json({"event": event, "data": payload})
        except Exception as e:
            raise PresenceDeliveryError(
                f"Push of '{event}' to {self.user_id} failed: {e}"
            ) from e


class ConnectionRegistry(PresenceRegistry):
    def __init__(self):
        self._sessions: dict[UserId, WebSocketSession] = {}
        self._lock = asyncio.Lock()

    def lookup(self, user_id: UserId) -> Optional[SessionHandle]:
        return self._sessions.get(user_id)

    async def connect(self, session: WebSocketSession) -> Optional[WebSocketSession]:
        """Register a session; returns the session it replaced, if any."""
        async with self._lock:
            previous = self._sessions.get(session.user_id)
            self._sessions[session.user_id] = session
        logger.info(f"User {session.user_id} online ({len(self._sessions)} online)")
        return previous

    async def disconnect(self, session: WebSocketSession) -> bool:
        """Remove the session if it is still the current one for its user."""
        async with self._lock:
            if self._sessions.get(session.user_id) is not session:
                return False
            del self._sessions[session.user_id]
        logger.info(f"User {session.user_id} offline ({len(self._sessions)} online)")
        return True
