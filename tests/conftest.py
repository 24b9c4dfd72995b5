# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a controllable clock, sample menu items and pages, and mocked
remote/local sources. No external services; all I/O is mocked or local.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from menucache.cache.memory_store import MemoryCacheStore
from menucache.core.models import MenuItem, PaginatedResult
from menucache.repository.menu_items_repository import MenuItemsRepository
from menucache.sources.base_local_source import BaseLocalSource
from menucache.sources.base_remote_source import BaseRemoteSource

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock, callable like ``datetime.now``."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


def make_item(item_id: str = "item_001", **overrides) -> MenuItem:
    defaults = dict(
        id=item_id,
        restaurant_id="resto_001",
        restaurant_name="Chez Nadia",
        name="Margherita",
        description="Tomato, mozzarella, basil",
        image="https://cdn.example.com/margherita.jpg",
        price=9.5,
        category="fast-food",
        created_at=datetime(2026, 2, 20, 18, 30, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return MenuItem(**defaults)


def make_page(*names: str, next_cursor: str | None = None) -> PaginatedResult:
    items = [make_item(f"item_{i:03d}", name=n) for i, n in enumerate(names)]
    return PaginatedResult(
        items=items,
        next_cursor=next_cursor,
        has_more=next_cursor is not None,
        total_count=len(items),
    )


# === FIXTURES: Sample data ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_item() -> MenuItem:
    return make_item()


@pytest.fixture
def remote_page() -> PaginatedResult:
    return make_page("Margherita", "Pepperoni")


@pytest.fixture
def local_page() -> PaginatedResult:
    return make_page("Offline Couscous")


# === FIXTURES: Collaborators ===


@pytest.fixture
def mock_remote(remote_page: PaginatedResult) -> AsyncMock:
    remote = AsyncMock(spec=BaseRemoteSource)
    remote.fetch_menu_items = AsyncMock(return_value=remote_page)
    return remote


@pytest.fixture
def mock_local(local_page: PaginatedResult) -> AsyncMock:
    local = AsyncMock(spec=BaseLocalSource)
    local.get_menu_items = AsyncMock(return_value=local_page)
    return local


@pytest.fixture
def memory_store(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def repository(
    mock_remote: AsyncMock, mock_local: AsyncMock, memory_store: MemoryCacheStore
) -> MenuItemsRepository:
    return MenuItemsRepository(
        remote_source=mock_remote,
        local_source=mock_local,
        cache_store=memory_store,
    )


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache
