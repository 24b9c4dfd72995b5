# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheStatistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict

from menucache.core.models import PaginatedResult


class CacheEntry(BaseModel):
    """A cached first page of results, stamped when it was stored.

    Entries are immutable: refreshing a key always writes a new entry.
    """

    model_config = ConfigDict(frozen=True)

    data: PaginatedResult
    cached_at: datetime
    ttl: timedelta

    @property
    def expires_at(self) -> datetime:
        return self.cached_at + self.ttl

    def is_valid(self, now: datetime | None = None) -> bool:
        """True while ``now`` is strictly before ``cached_at + ttl``."""
        if now is None:
            now = datetime.now(timezone.utc)
        return now < self.expires_at

    def is_expired(self, now: datetime | None = None) -> bool:
        return not self.is_valid(now)


@dataclass
class CacheStatistics:
    """Hit/miss counters for a cache store."""

    hits: int = 0
    misses: int = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return 0.0 if total == 0 else self.hits / total

    def as_dict(self) -> dict[str, Any]:
        """Diagnostic snapshot; hit rate is a percentage with one decimal."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": f"{self.hit_rate * 100:.1f}",
        }
