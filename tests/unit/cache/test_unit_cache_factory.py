# tests/unit/cache/test_unit_cache_factory.py — v4
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from menucache.cache.cache_factory import create_cache_store
from menucache.cache.json_store import JsonCacheStore
from menucache.cache.memory_store import MemoryCacheStore
from menucache.cache.sqlite_store import SqliteCacheStore
from menucache.config.settings import Settings


class TestCreateCacheStore:
    def test_default_memory(self):
        store = create_cache_store()
        assert isinstance(store, MemoryCacheStore)

    def test_memory_uses_max_entries(self):
        s = Settings(_env_file=None, cache_max_entries=3)
        store = create_cache_store(s)
        assert store._max_entries == 3

    def test_json_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_cache_store(s), JsonCacheStore)

    def test_sqlite_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_cache_store(s)
        assert isinstance(store, SqliteCacheStore)
        assert (tmp_path / "menucache.db").exists()
        store.close()

    def test_redis_missing_url(self):
        s = Settings(_env_file=None, cache_backend="redis", cache_redis_url="")
        with pytest.raises(ValueError, match="CACHE_REDIS_URL"):
            create_cache_store(s)

    def test_clock_is_forwarded(self, clock):
        store = create_cache_store(clock=clock)
        assert store.now() == clock()

    def test_unsupported_backend(self):
        """Settings validation rejects invalid backends before factory is reached."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache_backend="nonexistent")
