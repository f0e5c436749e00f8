"""Chat-related queries."""

from friendchat.application.queries.chat.get_conversation import (
    GetConversationQuery,
    GetConversationHandler,
)

__all__ = [
    "GetConversationQuery",
    "GetConversationHandler",
]
