# src/cache/redis_store.py — v2
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Lets several client processes share one cache. Keys carry no Redis
expiry: stale entries stay readable until overwritten or cleared.
"""

from __future__ import annotations

import logging
from typing import Any

from menucache.cache.base_cache_store import BaseCacheStore, Clock
from menucache.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "menucache:entry:"
_INDEX_KEY = "menucache:entry:__index__"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store for shared deployments."""

    def __init__(
        self,
        redis_url: str,
        clock: Clock | None = None,
        client: Any | None = None,
    ) -> None:
        super().__init__(clock=clock)
        if client is None:
            try:
                import redis
            except ImportError as e:
                raise ImportError(
                    "redis package required: pip install redis"
                ) from e
            client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._client = client

    async def _read(self, key: str) -> CacheEntry | None:
        data = self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except Exception as e:
            logger.warning("Dropping unreadable cache entry %s: %s", key, e)
            await self.delete(key)
            return None

    async def _write(self, key: str, entry: CacheEntry) -> None:
        self._client.set(f"{_KEY_PREFIX}{key}", entry.model_dump_json())
        # Index of live keys for clear() / list_keys()
        self._client.sadd(_INDEX_KEY, key)

    async def delete(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)

    async def clear(self) -> None:
        keys = list(self._client.smembers(_INDEX_KEY))
        for key in keys:
            self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.delete(_INDEX_KEY)
        logger.info("Redis cache cleared (%d keys)", len(keys))

    async def list_keys(self) -> list[str]:
        return sorted(self._client.smembers(_INDEX_KEY))

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
