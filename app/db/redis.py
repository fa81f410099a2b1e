"""Redis connection for rate limiting and collection locks."""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Any

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis client
redis_client: redis.Redis | None = None

# Process-local fallbacks, one per lock name
_local_locks: dict[str, asyncio.Lock] = {}


async def connect_redis() -> None:
    """Connect to Redis."""
    global redis_client

    redis_client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    # Test connection
    try:
        await redis_client.ping()
        logger.info(f"Connected to Redis: {settings.redis_url}")
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
        raise


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client

    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


def get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if redis_client is None:
        raise RuntimeError("Redis is not connected")
    return redis_client


def lock_name(collection: str) -> str:
    return f"nps:lock:{collection}"


def collection_lock(
    collection: str,
    client: redis.Redis | None = None,
) -> AbstractAsyncContextManager:
    """
    Get the mutual-exclusion lock guarding writes to ``collection``.

    With a Redis client the lock is shared by every process using the same
    Redis. Without one, a process-local ``asyncio.Lock`` is returned; it
    only serializes writers inside this process.
    """
    name = lock_name(collection)
    if client is not None:
        return client.lock(
            name,
            timeout=settings.lock_timeout_seconds,
            blocking_timeout=settings.lock_blocking_timeout_seconds,
        )
    if name not in _local_locks:
        _local_locks[name] = asyncio.Lock()
    return _local_locks[name]


async def refresh_lock(held: Any) -> None:
    """
    Restart the expiry of a held Redis lock.

    ``held`` is whatever entering the lock returned. Process-local locks
    never expire and are left alone.
    """
    extend = getattr(held, "extend", None)
    if extend is not None:
        await extend(settings.lock_timeout_seconds, replace_ttl=True)
