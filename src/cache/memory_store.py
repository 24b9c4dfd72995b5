# src/cache/memory_store.py — v1
"""In-process cache store (default CACHE_BACKEND=memory).

Entries live in an insertion-ordered dict. When ``max_entries`` is set, the
oldest keys are evicted after each write.
"""

from __future__ import annotations

import logging

from menucache.cache.base_cache_store import BaseCacheStore, Clock
from menucache.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store."""

    def __init__(
        self, max_entries: int | None = None, clock: Clock | None = None
    ) -> None:
        super().__init__(clock=clock)
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._entries: dict[str, CacheEntry] = {}

    async def _read(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    async def _write(self, key: str, entry: CacheEntry) -> None:
        # Re-inserting moves the key to the newest position.
        self._entries.pop(key, None)
        self._entries[key] = entry
        self._evict_overflow()

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()
        logger.info("Memory cache cleared")

    async def list_keys(self) -> list[str]:
        return list(self._entries)

    def _evict_overflow(self) -> None:
        if self._max_entries is None:
            return
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        for key in list(self._entries)[:overflow]:
            del self._entries[key]
        logger.debug("Evicted %d old cache entries", overflow)
