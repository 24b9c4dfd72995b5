# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from menucache.cache.base_cache_store import BaseCacheStore, Clock
from menucache.config.settings import Settings


def create_cache_store(
    settings: Settings | None = None, clock: Clock | None = None
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the memory backend.
        clock: Optional time source, mainly for tests.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from menucache.cache.memory_store import MemoryCacheStore
        max_entries = 50 if settings is None else settings.cache_max_entries
        return MemoryCacheStore(max_entries=max_entries, clock=clock)

    if backend == "json":
        from menucache.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=settings.cache_root, clock=clock)

    if backend == "sqlite":
        from menucache.cache.sqlite_store import SqliteCacheStore
        db_path = settings.cache_root / "menucache.db"
        return SqliteCacheStore(db_path=db_path, clock=clock)

    if backend == "redis":
        from menucache.cache.redis_store import RedisCacheStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisCacheStore(redis_url=settings.cache_redis_url, clock=clock)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
