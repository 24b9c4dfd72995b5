# src/main.py — v3
"""CLI entry point: fetch, clear, stats commands.

Usage:
    menucache fetch [--query Q] [--category C ...] [--cuisine C ...]
                    [--min-price N --max-price N] [--limit N] [--cursor C]
    menucache clear
    menucache stats

Configuration comes from .env (see config/settings.py).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from typing import TYPE_CHECKING

from menucache.version import __version__

if TYPE_CHECKING:
    from menucache.config.settings import Settings
    from menucache.core.models import PriceRange

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        from menucache.config.settings import load_settings

        settings = load_settings()
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="menucache",
        description=f"menucache v{__version__}: cached menu-items client",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- fetch ---
    p_fetch = subparsers.add_parser("fetch", help="Fetch one page of menu items")
    p_fetch.add_argument("-q", "--query", default=None, help="Free-text search")
    p_fetch.add_argument(
        "--category", dest="categories", action="append", default=None,
        help="Category filter (repeatable)",
    )
    p_fetch.add_argument(
        "--cuisine", dest="cuisines", action="append", default=None,
        help="Cuisine filter (repeatable)",
    )
    p_fetch.add_argument("--min-price", type=float, default=None)
    p_fetch.add_argument("--max-price", type=float, default=None)
    p_fetch.add_argument(
        "-n", "--limit", type=int, default=20,
        help="Page size (default: 20)",
    )
    p_fetch.add_argument(
        "--cursor", default=None,
        help="Continuation cursor from a previous page",
    )
    p_fetch.set_defaults(func=_cmd_fetch)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Clear the menu items cache")
    p_clear.set_defaults(func=_cmd_clear)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show cached entries")
    p_stats.set_defaults(func=_cmd_stats)

    return parser


async def _cmd_fetch(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch a page through the repository and print it."""
    from menucache.logging.context import set_request_context
    from menucache.repository.repository_factory import create_menu_items_repository

    if args.limit <= 0:
        logger.error("--limit must be positive")
        return 1

    price_range = _price_range(args.min_price, args.max_price)
    set_request_context(uuid.uuid4().hex[:12])
    repository = create_menu_items_repository(settings)

    result = await repository.fetch(
        limit=args.limit,
        cursor=args.cursor,
        query=args.query,
        categories=args.categories,
        cuisines=args.cuisines,
        price_range=price_range,
    )
    # Let a cache-hit refresh land before the process exits
    await repository.wait_for_background_refreshes()

    for item in result.items:
        print(f"  {item.id}  {item.name:<40.40s} {item.price:>8.2f}  {item.category}")
    print(f"\n{len(result.items)} items (has_more={result.has_more})")
    if result.next_cursor:
        print(f"Next cursor: {result.next_cursor}")

    stats = repository.get_cache_statistics()
    print(
        f"Cache: hits={stats['hits']} misses={stats['misses']} "
        f"hit_rate={stats['hit_rate']}%"
    )
    return 0


async def _cmd_clear(args: argparse.Namespace, settings: Settings) -> int:
    """Clear every cached page in the persistent backend."""
    from menucache.cache.cache_factory import create_cache_store

    if not _has_persistent_cache(settings):
        return 1

    store = create_cache_store(settings)
    removed = len(await store.list_keys())
    await store.clear()
    print(f"Cache cleared ({removed} entries)")
    return 0


async def _cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    """List cached keys with their freshness."""
    from menucache.cache.cache_factory import create_cache_store

    if not _has_persistent_cache(settings):
        return 1

    store = create_cache_store(settings)
    keys = await store.list_keys()
    valid = 0
    for key in keys:
        entry = await store.peek(key)
        if entry is None:
            continue
        state = "valid" if entry.is_valid(store.now()) else "stale"
        valid += state == "valid"
        print(f"  [{state}] {key}  ({len(entry.data.items)} items, "
              f"expires {entry.expires_at.isoformat()})")

    print(f"\nCache statistics:")
    print(f"  Entries:  {len(keys)}")
    print(f"  Valid:    {valid}")
    print(f"  Stale:    {len(keys) - valid}")
    return 0


def _has_persistent_cache(settings: Settings) -> bool:
    """The memory backend starts empty on every run, so there is nothing to manage."""
    if settings.cache_backend == "memory":
        logger.error(
            "CACHE_BACKEND=memory does not persist between runs; "
            "set CACHE_BACKEND to json, sqlite or redis"
        )
        return False
    return True


def _price_range(
    min_price: float | None, max_price: float | None
) -> PriceRange | None:
    """Build a PriceRange when both bounds are given."""
    from menucache.core.models import PriceRange

    if min_price is None and max_price is None:
        return None
    if min_price is None or max_price is None:
        raise ValueError("--min-price and --max-price must be given together")
    return PriceRange(start=min_price, end=max_price)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from menucache.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
