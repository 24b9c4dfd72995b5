# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency.
Survives process restarts, unlike the memory backend.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from menucache.cache.base_cache_store import BaseCacheStore, Clock
from menucache.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    cached_at TEXT NOT NULL
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def _read(self, key: str) -> CacheEntry | None:
        cursor = self._conn.execute(
            "SELECT data FROM cache_entries WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return CacheEntry.model_validate_json(row[0])
        except Exception as e:
            logger.warning("Dropping unreadable cache entry %s: %s", key, e)
            await self.delete(key)
            return None

    async def _write(self, key: str, entry: CacheEntry) -> None:
        """Upsert: a second write to the same key replaces the row."""
        self._conn.execute(
            """INSERT OR REPLACE INTO cache_entries (key, data, cached_at)
               VALUES (?, ?, ?)""",
            (key, entry.model_dump_json(), entry.cached_at.isoformat()),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
        self._conn.commit()

    async def clear(self) -> None:
        cursor = self._conn.execute("DELETE FROM cache_entries")
        self._conn.commit()
        logger.info("SQLite cache cleared (%d rows)", cursor.rowcount)

    async def list_keys(self) -> list[str]:
        cursor = self._conn.execute("SELECT key FROM cache_entries ORDER BY key")
        return [row[0] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
