"""Redis cache for public brief listings."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "intel:briefs:"

Loader = Callable[[], Awaitable[Any]]


def archive_key(search: str | None) -> str:
    term = (search or "").strip().lower()
    if not term:
        return "archive:all"
    return f"archive:q:{hashlib.sha1(term.encode('utf-8')).hexdigest()}"


class BriefListingCache:
    """JSON values under `intel:briefs:*` with a TTL.

    Redis trouble never fails a read: errors are logged and the loader's
    result is returned uncached.
    """

    def __init__(self, redis: Redis, ttl_seconds: int | None = None) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.listing_cache_ttl_seconds

    async def get_or_load(self, key: str, loader: Loader) -> Any:
        full_key = f"{KEY_PREFIX}{key}"
        try:
            cached = await self.redis.get(full_key)
        except RedisError as e:
            logger.warning("Listing cache read failed", extra={"key": full_key, "error": str(e)})
            return await loader()

        if cached is not None:
            return json.loads(cached)

        value = await loader()
        try:
            await self.redis.set(full_key, json.dumps(value), ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning("Listing cache write failed", extra={"key": full_key, "error": str(e)})
        return value

    async def invalidate_all(self) -> int:
        """Drop every cached listing; returns how many keys were removed."""
        removed = 0
        try:
            keys = [key async for key in self.redis.scan_iter(match=f"{KEY_PREFIX}*")]
            if keys:
                removed = int(await self.redis.delete(*keys))
        except RedisError as e:
            logger.warning("Listing cache invalidation failed", extra={"error": str(e)})
            return 0
        logger.info("Listing cache invalidated", extra={"keys": removed})
        return removed
