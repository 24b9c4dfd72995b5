# src/cache/keys.py — v2
"""Deterministic cache keys for menu-item filter combinations.

Layout: ``menu_items:<query>:<categories>:<cuisines>:<min>:<max>``.
Set members are sorted before joining so the same logical filter always
maps to the same key, whatever order the caller built its sets in. The
query and every member are percent-encoded, so a value containing a
separator cannot collide with a different filter.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote

from menucache.core.models import PriceRange

CACHE_NAMESPACE = "menu_items"

_PART_SEPARATOR = ":"
_MEMBER_SEPARATOR = ","


def build_cache_key(
    query: str | None = None,
    categories: Iterable[str] | None = None,
    cuisines: Iterable[str] | None = None,
    price_range: PriceRange | None = None,
) -> str:
    """Build the cache key for a filter combination.

    The pagination cursor is deliberately not an input: only first pages
    are cached.

    Args:
        query: Free-text search, or None.
        categories: Category filter values, or None.
        cuisines: Cuisine filter values, or None.
        price_range: Price bounds, or None.

    Returns:
        Key string; absent filters render as empty segments.
    """
    parts = [
        CACHE_NAMESPACE,
        _escape(query or ""),
        _join_members(categories),
        _join_members(cuisines),
        _format_bound(price_range.start) if price_range else "",
        _format_bound(price_range.end) if price_range else "",
    ]
    return _PART_SEPARATOR.join(parts)


def _join_members(values: Iterable[str] | None) -> str:
    """Sort and join filter members (duplicates collapse)."""
    if not values:
        return ""
    return _MEMBER_SEPARATOR.join(_escape(v) for v in sorted(set(values)))


def _escape(value: str) -> str:
    return quote(value, safe="")


def _format_bound(value: float) -> str:
    """Render a price bound so 10 and 10.0 produce the same segment."""
    return repr(float(value))
