"""
Realtime Layer - Presence registry over WebSocket connections.
"""

from friendchat.infrastructure.realtime.connection_registry import (
    ConnectionRegistry,
    WebSocketSession,
)

__all__ = [
    "ConnectionRegistry",
    "WebSocketSession",
]
