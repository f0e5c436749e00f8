"""Shared slowapi limiter (registered on app.state in fastapi_app.py)."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from friendchat.config.settings import Config

limiter = Limiter(
    key_func=get_remote_address,
    enabled=Config.RATELIMIT_ENABLED,
    storage_uri=Config.RATELIMIT_STORAGE_URI,
)


def send_rate_limit() -> str:
    # Read per request so the limit can be tuned without re-decorating routes
    return Config.SEND_RATE_LIMIT
