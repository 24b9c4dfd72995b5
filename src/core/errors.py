# src/core/errors.py — v1
"""Exception hierarchy shared by sources, stores and the repository."""

from __future__ import annotations


class MenuCacheError(Exception):
    """Base class for menucache errors."""


class RemoteSourceError(MenuCacheError):
    """The remote menu-items backend could not serve a page."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LocalSourceError(MenuCacheError):
    """The on-device snapshot is missing or unreadable."""
