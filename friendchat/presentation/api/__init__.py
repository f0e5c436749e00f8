"""
API Routers - FastAPI endpoint definitions.
"""

from friendchat.presentation.api.friends import router as friends_router
from friendchat.presentation.api.messages import router as messages_router
from friendchat.presentation.api.realtime import router as realtime_router
from friendchat.presentation.api.metrics import router as metrics_router

__all__ = [
    "friends_router",
    "messages_router",
    "realtime_router",
    "metrics_router",
]
