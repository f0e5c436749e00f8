"""
Realtime Presence Endpoint - WS /ws?token=<JWT>

While the socket is open the user is "online": the ConnectionRegistry maps
their id to this connection and SendMessageHandler pushes
{"event": "newMessage", "data": <Message>} frames through it.

Client → server frames are read only to notice the disconnect.
"""

from logging import getLogger
from typing import Optional
import jwt
from fastapi import APIRouter, WebSocket
from friendchat.infrastructure.realtime import ConnectionRegistry, WebSocketSession
from friendchat.observability import (
    decrement_active_connections,
    increment_active_connections,
)
from friendchat.presentation.dependencies.auth import (
    InvalidTokenClaims,
    decode_service_token,
)

logger = getLogger(__name__)

# Application-defined close code (4000-4999 range) for auth failures
WS_CLOSE_UNAUTHORIZED = 4001

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def presence(websocket: WebSocket, token: Optional[str] = None):
    try:
        user = decode_service_token(token or "")
    except (jwt.InvalidTokenError, InvalidTokenClaims) as e:
        logger.info(f"Rejected realtime connection: {e}")
        # Close code 4001 only reaches the client once the handshake is complete
        await websocket.accept()
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED)
        return

    registry = await websocket.app.state.dishka_container.get(ConnectionRegistry)

    await websocket.accept()
    session = WebSocketSession(user.id, websocket)
    replaced = await registry.connect(session)
    if replaced is None:
        increment_active_connections()

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
    finally:
        if await registry.disconnect(session):
            decrement_active_connections()
