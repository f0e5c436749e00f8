"""
Prometheus Metrics for the chat backend.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus scraper

METRIC TYPES:
    - Gauge: Value goes up/down (current count, e.g., open connections)
    - Counter: Value only goes up (total count, e.g., messages sent)
    - Histogram: Distribution (for percentiles like P95, e.g., latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_CONNECTIONS = Gauge(
    "chat_active_connections", "Number of users with an open realtime connection"
)

REQUEST_LATENCY = Histogram(
    "http_server_request_duration_seconds",
    "Http request latency in seconds",
    ["method", "route", "http_status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)

MESSAGES_SENT_TOTAL = Counter(
    "chat_messages_sent_total",
    "Total number of messages persisted",
    ["has_attachment"],
)

LIVE_PUSH_TOTAL = Counter(
    "chat_live_push_total",
    "Live push attempts after a message was persisted, by outcome",
    ["outcome"],
)

FRIEND_LINKS_TOTAL = Counter(
    "chat_friend_links_total",
    "Total number of friendships created",
)

ERRORS_TOTAL = Counter(
    "chat_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS (avoid hardcoding strings throughout codebase)
# =============================================================================
class MetricsErrorType:
    """Error type labels for chat_errors_total metric."""

    UPLOAD_FAILED = "upload_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    FRIEND_LINK_ASYMMETRIC = "friend_link_asymmetric"
    CACHE_FAILED = "cache_failed"
    UNHANDLED = "unhandled"


class PushOutcome:
    """Outcome labels for chat_live_push_total metric."""

    DELIVERED = "delivered"
    OFFLINE = "offline"
    FAILED = "failed"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def increment_active_connections():
    """Call when a realtime connection is registered. Integration point: presentation/api/realtime.py"""
    ACTIVE_CONNECTIONS.inc()


def decrement_active_connections():
    """Call when a realtime connection goes away (in finally block)."""
    ACTIVE_CONNECTIONS.dec()


def observe_request_latency(method: str, route: str, status_code: int, duration: float):
    """Call to record request latency. Integration point: fastapi_app.MetricsMiddleware"""
    REQUEST_LATENCY.labels(
        method=method, route=route, http_status_code=str(status_code)
    ).observe(duration)


def increment_messages_sent(has_attachment: bool):
    """Call after a message is persisted. Integration point: SendMessageHandler"""
    MESSAGES_SENT_TOTAL.labels(has_attachment=str(has_attachment).lower()).inc()


def increment_live_push(outcome: str):
    """Call once per send with a PushOutcome label. Integration point: SendMessageHandler"""
    LIVE_PUSH_TOTAL.labels(outcome=outcome).inc()


def increment_friend_links():
    """Call after both friend edges are written. Integration point: AddFriendHandler"""
    FRIEND_LINKS_TOTAL.inc()


def increment_error(error_type: str):
    """Call to record errors. Use MetricsErrorType constants for error_type."""
    ERRORS_TOTAL.labels(error_type=error_type).inc()


def get_metrics_content():
    """Return the metrics in Prometheus exposition format."""
    return generate_latest(), CONTENT_TYPE_LATEST
