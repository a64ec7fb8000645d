"""Redis client helpers."""

import logging
import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config import settings
from app.core.exceptions import OperationInProgressError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "intel:lock:"

_redis_client: Redis | None = None


def get_redis_client() -> Redis:
    """Get a shared Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


async def get_redis() -> AsyncGenerator[Redis, None]:
    """FastAPI dependency yielding the shared client."""
    yield get_redis_client()


@asynccontextmanager
async def operation_lock(
    redis: Redis,
    operation: str,
    *,
    ttl_seconds: int | None = None,
) -> AsyncGenerator[None, None]:
    """Hold a short-lived exclusive lock for `operation`.

    A second caller gets `OperationInProgressError` instead of waiting.
    The lock is released only by the holder that set it; the TTL frees it
    if the holder dies. An unreachable Redis raises `UpstreamUnavailableError`.
    """
    key = f"{LOCK_KEY_PREFIX}{operation}"
    token = secrets.token_hex(8)
    try:
        acquired = await redis.set(key, token, nx=True, ex=ttl_seconds or settings.operation_lock_ttl_seconds)
    except RedisError as e:
        logger.error("Lock store unavailable", extra={"operation": operation, "error": str(e)})
        raise UpstreamUnavailableError("Redis", "Lock store unavailable") from e
    if not acquired:
        logger.warning("Operation already in progress", extra={"operation": operation})
        raise OperationInProgressError(operation)
    try:
        yield
    finally:
        try:
            if await redis.get(key) == token:
                await redis.delete(key)
        except RedisError as e:
            # Left to expire via its TTL.
            logger.warning("Lock release failed", extra={"operation": operation, "error": str(e)})


async def close_redis() -> None:
    """Close Redis client connections."""
    global _redis_client
    if _redis_client is None:
        return

    await _redis_client.aclose()
    _redis_client = None
    logger.info("Redis connection closed")
