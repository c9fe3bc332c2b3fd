"""
Redis connection management.
Handles the async Redis client shared by the worker and the API.
"""

import logging
from collections.abc import AsyncGenerator

import redis.asyncio as aioredis

from worker_integrity.config import get_settings

logger = logging.getLogger(__name__)

# Global client instance
_client: aioredis.Redis | None = None


def create_redis() -> aioredis.Redis:
    """
    Create an async Redis client for REDIS_URL.

    Creating the client does not open a connection; the first command does.

    Returns:
        Redis: The async Redis client.
    """
    settings = get_settings()
    return aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
    )


async def init_redis() -> aioredis.Redis:
    """
    Initialize the shared Redis client.
    Should be called on startup, after the version guard has passed.
    """
    global _client
    if _client is None:
        _client = create_redis()
        logger.info("Redis client initialized")
    return _client


def get_redis() -> aioredis.Redis:
    """
    Get the shared Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _client


async def close_redis() -> None:
    """
    Close the Redis connection.
    Should be called on shutdown.
    """
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Redis connection closed")


async def get_redis_dependency() -> AsyncGenerator[aioredis.Redis]:
    """
    FastAPI dependency for the shared Redis client.

    Yields:
        Redis: The async Redis client.
    """
    yield get_redis()
