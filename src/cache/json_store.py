# src/cache/json_store.py — v2
"""JSON file-based cache store (CACHE_BACKEND=json).

Stores each entry as an individual JSON file under CACHE_ROOT. File names
are the SHA-256 of the cache key, since keys contain separators that are
not portable in file names; the key itself is kept inside the file.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path

from menucache.cache.base_cache_store import BaseCacheStore, Clock
from menucache.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def _read(self, key: str) -> CacheEntry | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CacheEntry.model_validate(data["entry"])
        except Exception as e:
            logger.warning("Dropping unreadable cache entry %s: %s", key, e)
            path.unlink(missing_ok=True)
            return None

    async def _write(self, key: str, entry: CacheEntry) -> None:
        path = self._entry_path(key)
        payload = {"key": key, "entry": entry.model_dump(mode="json")}
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        tmp.replace(path)

    async def delete(self, key: str) -> None:
        self._entry_path(key).unlink(missing_ok=True)

    async def clear(self) -> None:
        removed = 0
        for path in self._root.glob("*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        logger.info("JSON cache cleared (%d files)", removed)

    async def list_keys(self) -> list[str]:
        keys: list[str] = []
        for path in sorted(self._root.glob("*.json")):
            try:
                keys.append(json.loads(path.read_text(encoding="utf-8"))["key"])
            except Exception:
                continue
        return keys

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"
