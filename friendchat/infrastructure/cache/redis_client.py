"""
Async Redis Client Factory.

Creates Redis client with connection pooling for DI container.
Uses redis.asyncio so cache calls never block the event loop.
"""

import logging
import redis.asyncio as redis
from redis.asyncio import Redis
from friendchat.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client() -> Redis:
    """
    Create async Redis client with connection pool.

    Raises:
        redis.ConnectionError: If Redis is not reachable
    """
    client = redis.from_url(
        Config.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    # Test connection
    await client.ping()
    logger.info(f"[Redis] Connected to {Config.REDIS_URL}")

    return client


async def close_redis_client(client: Redis) -> None:
    """Close Redis client connection (application shutdown)."""
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
