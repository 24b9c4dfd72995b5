# src/repository/menu_items_repository.py — v2
"""Read-through menu-items repository.

Fuses a cache store, a remote source and a local fallback behind one
``fetch`` call:

    1. First pages (no cursor) are served from cache while the entry is
       valid, and refreshed in a detached background task.
    2. Misses, stale entries and later pages go to the remote source; fresh
       first pages are written back with a fixed 15 minute TTL.
    3. If the remote fails for any reason, the local fallback answers with
       an unfiltered page. If that fails too, its error propagates.

Every successful unfiltered first page is also handed to the local source
so the fallback has something recent to serve.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import timedelta
from typing import Any

from menucache.cache.base_cache_store import BaseCacheStore
from menucache.cache.keys import build_cache_key
from menucache.core.models import PaginatedResult, PriceRange
from menucache.logging.context import operation_context, set_operation_context
from menucache.sources.base_local_source import BaseLocalSource
from menucache.sources.base_remote_source import BaseRemoteSource

logger = logging.getLogger(__name__)

MENU_ITEMS_CACHE_TTL = timedelta(minutes=15)


class MenuItemsRepository:
    """Stale-while-revalidate access to menu items.

    The caller owns the instance and its collaborators; share one instance
    per process so the cache is shared too.
    """

    def __init__(
        self,
        remote_source: BaseRemoteSource,
        local_source: BaseLocalSource,
        cache_store: BaseCacheStore,
    ) -> None:
        self._remote = remote_source
        self._local = local_source
        self._cache = cache_store
        # Strong references so the event loop does not drop running refreshes
        self._refresh_tasks: set[asyncio.Task[None]] = set()

    async def fetch(
        self,
        limit: int,
        cursor: str | None = None,
        query: str | None = None,
        categories: Iterable[str] | None = None,
        cuisines: Iterable[str] | None = None,
        price_range: PriceRange | None = None,
    ) -> PaginatedResult:
        """Fetch one page of menu items.

        Args:
            limit: Page size, must be positive.
            cursor: Continuation token from a previous page; None for the
                first page.
            query: Free-text search.
            categories: Category names to match.
            cuisines: Cuisine names to match.
            price_range: Inclusive price bounds.

        Returns:
            The page, from cache, remote or local fallback.

        Raises:
            ValueError: If ``limit`` is not positive.
            Exception: Whatever the local fallback raised, when both the
                remote and the fallback failed.
        """
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        categories = set(categories) if categories is not None else None
        cuisines = set(cuisines) if cuisines is not None else None
        cache_key = build_cache_key(query, categories, cuisines, price_range)

        with operation_context("fetch", cache_key):
            if cursor is None:
                cached = await self._cache.get(cache_key)
                if cached is not None and cached.is_valid(self._cache.now()):
                    logger.debug("Cache HIT (%s)", cache_key)
                    self._spawn_refresh(
                        cache_key, limit, query, categories, cuisines, price_range
                    )
                    return cached.data
                logger.debug("Cache MISS (%s)", cache_key)

            try:
                result = await self._fetch_remote(
                    limit, cursor, query, categories, cuisines, price_range
                )
            except Exception as e:
                logger.warning("Remote fetch failed, trying local fallback: %s", e)
                try:
                    return await self._local.get_menu_items(limit)
                except Exception as local_error:
                    logger.error("Local fallback failed: %s", local_error)
                    raise

            if cursor is None:
                await self._store(cache_key, result)
                if _is_unfiltered(query, categories, cuisines, price_range):
                    await self._save_snapshot(result)

            logger.info("Fetched %d items from remote", len(result.items))
            return result

    def get_cache_statistics(self) -> dict[str, Any]:
        """Hit/miss snapshot of the underlying cache store."""
        return self._cache.statistics.as_dict()

    async def clear_cache(self) -> None:
        """Drop every cached page."""
        with operation_context("clear"):
            await self._cache.clear()
            logger.info("Menu items cache cleared")

    @property
    def pending_refreshes(self) -> int:
        """Number of background refreshes still running."""
        return len(self._refresh_tasks)

    async def wait_for_background_refreshes(self) -> None:
        """Wait for in-flight refreshes, e.g. before shutting down.

        ``fetch`` never waits on them; this is for owners of the instance.
        """
        if self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    # --- internals ---

    async def _fetch_remote(
        self,
        limit: int,
        cursor: str | None,
        query: str | None,
        categories: set[str] | None,
        cuisines: set[str] | None,
        price_range: PriceRange | None,
    ) -> PaginatedResult:
        return await self._remote.fetch_menu_items(
            limit=limit,
            cursor=cursor,
            query=query,
            categories=sorted(categories) if categories is not None else None,
            cuisines=sorted(cuisines) if cuisines is not None else None,
            min_price=price_range.start if price_range else None,
            max_price=price_range.end if price_range else None,
        )

    async def _store(self, cache_key: str, result: PaginatedResult) -> None:
        """Write a fresh first page; a failing store never loses the result."""
        try:
            await self._cache.set(cache_key, result, MENU_ITEMS_CACHE_TTL)
        except Exception as e:
            logger.warning("Cache write failed (%s): %s", cache_key, e)

    async def _save_snapshot(self, result: PaginatedResult) -> None:
        """Keep the local fallback in step with the latest unfiltered page."""
        if not result.items:
            return
        try:
            await self._local.save_menu_items(result.items)
        except Exception as e:
            logger.warning("Local snapshot save failed: %s", e)

    def _spawn_refresh(
        self,
        cache_key: str,
        limit: int,
        query: str | None,
        categories: set[str] | None,
        cuisines: set[str] | None,
        price_range: PriceRange | None,
    ) -> None:
        task = asyncio.create_task(
            self._refresh(cache_key, limit, query, categories, cuisines, price_range),
            name=f"menu-items-refresh:{cache_key}",
        )
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _refresh(
        self,
        cache_key: str,
        limit: int,
        query: str | None,
        categories: set[str] | None,
        cuisines: set[str] | None,
        price_range: PriceRange | None,
    ) -> None:
        """Re-fetch a first page and overwrite its entry. Never raises."""
        set_operation_context("refresh", cache_key)
        try:
            fresh = await self._fetch_remote(
                limit, None, query, categories, cuisines, price_range
            )
            await self._cache.set(cache_key, fresh, MENU_ITEMS_CACHE_TTL)
        except Exception as e:
            logger.warning("Background refresh failed (%s): %s", cache_key, e)
            return
        if _is_unfiltered(query, categories, cuisines, price_range):
            await self._save_snapshot(fresh)
        logger.debug("Background refresh complete (%s)", cache_key)


def _is_unfiltered(
    query: str | None,
    categories: set[str] | None,
    cuisines: set[str] | None,
    price_range: PriceRange | None,
) -> bool:
    return not (query or categories or cuisines) and price_range is None
