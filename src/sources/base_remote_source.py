# src/sources/base_remote_source.py — v1
"""Abstract remote menu-items source."""

from __future__ import annotations

from abc import ABC, abstractmethod

from menucache.core.models import PaginatedResult


class BaseRemoteSource(ABC):
    """Server-side filtered, cursor-paginated menu-items backend."""

    @abstractmethod
    async def fetch_menu_items(
        self,
        limit: int,
        cursor: str | None = None,
        query: str | None = None,
        categories: list[str] | None = None,
        cuisines: list[str] | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> PaginatedResult:
        """Fetch one page. Any exception signals a remote failure."""
