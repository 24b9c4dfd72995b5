# src/sources/base_local_source.py — v2
"""Abstract on-device fallback source."""

from __future__ import annotations

from abc import ABC, abstractmethod

from menucache.core.models import MenuItem, PaginatedResult


class BaseLocalSource(ABC):
    """Best-effort local copy of menu items, used when the remote is down."""

    @abstractmethod
    async def get_menu_items(self, limit: int) -> PaginatedResult:
        """Return up to ``limit`` items. Filters are not supported."""

    async def save_menu_items(self, items: list[MenuItem]) -> None:
        """Replace the local copy with ``items``.

        Called by the repository after each successful unfiltered first
        page. Read-only sources keep the default, which does nothing.
        """
