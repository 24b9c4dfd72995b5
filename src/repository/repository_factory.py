# src/repository/repository_factory.py — v1
"""Build a MenuItemsRepository from settings."""

from __future__ import annotations

from menucache.cache.base_cache_store import Clock
from menucache.cache.cache_factory import create_cache_store
from menucache.config.settings import Settings
from menucache.repository.menu_items_repository import MenuItemsRepository
from menucache.sources.json_local_source import JsonLocalSource
from menucache.sources.postgrest_source import PostgrestRemoteSource


def create_menu_items_repository(
    settings: Settings | None = None, clock: Clock | None = None
) -> MenuItemsRepository:
    """Wire cache store, PostgREST remote and JSON snapshot fallback.

    Raises:
        ValueError: If REMOTE_URL is not configured.
    """
    settings = settings or Settings()
    if not settings.remote_url:
        raise ValueError("REMOTE_URL must be set to build the repository")

    remote = PostgrestRemoteSource(
        base_url=settings.remote_url,
        api_key=settings.remote_api_key,
        table=settings.remote_table,
        timeout_s=settings.remote_timeout_s,
        cuisine_timeout_s=settings.remote_cuisine_timeout_s,
    )
    local = JsonLocalSource(settings.local_snapshot_path)
    cache = create_cache_store(settings, clock=clock)
    return MenuItemsRepository(
        remote_source=remote, local_source=local, cache_store=cache
    )
