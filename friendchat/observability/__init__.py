"""Observability package for the chat backend."""

from friendchat.observability.metrics import (
    increment_active_connections,
    decrement_active_connections,
    observe_request_latency,
    increment_messages_sent,
    increment_live_push,
    increment_friend_links,
    increment_error,
    get_metrics_content,
    MetricsErrorType,
    PushOutcome,
)

__all__ = [
    "increment_active_connections",
    "decrement_active_connections",
    "observe_request_latency",
    "increment_messages_sent",
    "increment_live_push",
    "increment_friend_links",
    "increment_error",
    "get_metrics_content",
    "MetricsErrorType",
    "PushOutcome",
]
