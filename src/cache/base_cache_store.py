# src/cache/base_cache_store.py — v3
"""Abstract cache store interface.

Backends implement raw persistence (``_read`` / ``_write`` / ``delete`` /
``clear`` / ``list_keys``); the base class stamps entries with the store
clock and keeps hit/miss statistics.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from menucache.cache.models import CacheEntry, CacheStatistics
from menucache.core.models import PaginatedResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or utc_now
        self._stats = CacheStatistics()

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under ``key``, valid or not.

        A read counts as a hit only when the entry exists and is still
        valid at the store clock; anything else counts as a miss. An entry
        claiming a total but holding no items is corrupt: it is deleted
        and reported as absent.
        """
        entry = await self._read(key)
        if entry is not None and _is_corrupt(entry):
            logger.warning("Dropping corrupted cache entry %s", key)
            await self.delete(key)
            entry = None
        if entry is not None and entry.is_valid(self.now()):
            self._stats.record_hit()
        else:
            self._stats.record_miss()
        return entry

    async def peek(self, key: str) -> CacheEntry | None:
        """Read ``key`` without touching the statistics."""
        return await self._read(key)

    async def set(
        self, key: str, data: PaginatedResult, ttl: timedelta
    ) -> CacheEntry:
        """Stamp a new entry and overwrite whatever ``key`` held."""
        entry = CacheEntry(data=data, cached_at=self.now(), ttl=ttl)
        await self._write(key, entry)
        return entry

    def now(self) -> datetime:
        """Current time according to the store clock."""
        return self._clock()

    @property
    def statistics(self) -> CacheStatistics:
        return self._stats

    @abstractmethod
    async def _read(self, key: str) -> CacheEntry | None:
        """Load the raw entry for ``key``."""

    @abstractmethod
    async def _write(self, key: str, entry: CacheEntry) -> None:
        """Persist ``entry`` under ``key``, replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a single entry."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """List all stored keys, stale ones included."""


def _is_corrupt(entry: CacheEntry) -> bool:
    return not entry.data.items and entry.data.total_count > 0
