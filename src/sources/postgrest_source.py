# src/sources/postgrest_source.py — v2
"""PostgREST (Supabase REST) remote source over httpx.

Filtering, ordering and pagination all happen server-side:
    - text search: ``or=(name.ilike.*q*,description.ilike.*q*)``
    - categories: ``category=eq.x`` / ``category=in.(...)``
    - cuisines: names resolved to ids via ``cuisine_types`` first
    - price: ``price=gte.min`` and ``price=lte.max``
    - cursor: ``created_at=lt.<cursor>``, newest first

One extra row is requested to learn whether another page exists.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from menucache.core.errors import RemoteSourceError
from menucache.core.models import MenuItem, PaginatedResult
from menucache.sources.base_remote_source import BaseRemoteSource

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = (
    "id,restaurant_id,restaurant_name,name,description,image,price,category,"
    "cuisine_type_id,category_id,is_available,is_featured,preparation_time,"
    "rating,review_count,variants,pricing_options,supplements,"
    "created_at,updated_at"
)


class PostgrestRemoteSource(BaseRemoteSource):
    """Menu items served by a PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        table: str = "menu_items",
        timeout_s: float = 10.0,
        cuisine_timeout_s: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = table
        self._timeout_s = timeout_s
        self._cuisine_timeout_s = cuisine_timeout_s
        self._transport = transport

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
        params: list[tuple[str, str]] = [
            ("select", _SELECT_COLUMNS),
            ("is_available", "eq.true"),
        ]

        if query:
            params.append(
                ("or", f"(name.ilike.*{query}*,description.ilike.*{query}*)")
            )

        if categories:
            params.append(("category", _match_filter(categories)))

        async with self._client() as client:
            if cuisines:
                cuisine_ids = await self._get_cuisine_ids(client, cuisines)
                if not cuisine_ids:
                    # Unknown cuisines cannot match anything
                    return PaginatedResult()
                params.append(("cuisine_type_id", _match_filter(cuisine_ids)))

            if min_price is not None:
                params.append(("price", f"gte.{min_price}"))
            if max_price is not None:
                params.append(("price", f"lte.{max_price}"))
            if cursor is not None:
                params.append(("created_at", f"lt.{cursor}"))

            params.append(("order", "created_at.desc"))
            params.append(("limit", str(limit + 1)))

            t0 = time.monotonic()
            try:
                response = await client.get(f"/rest/v1/{self._table}", params=params)
                response.raise_for_status()
                rows = response.json()
            except httpx.HTTPStatusError as e:
                raise RemoteSourceError(
                    f"Menu items request failed: HTTP {e.response.status_code}",
                    status_code=e.response.status_code,
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise RemoteSourceError(f"Menu items request failed: {e}") from e
            latency_ms = int((time.monotonic() - t0) * 1000)

        if not isinstance(rows, list):
            raise RemoteSourceError("Menu items response is not a JSON array")

        page_rows = rows[:limit]
        items = _parse_items(page_rows)
        has_more = len(rows) > limit
        # Cursor follows the last row read, even when that row was skipped
        next_cursor = _row_cursor(page_rows[-1]) if has_more and page_rows else None

        logger.debug(
            "Fetched %d items in %dms (has_more=%s)", len(items), latency_ms, has_more
        )
        return PaginatedResult(
            items=items,
            next_cursor=next_cursor,
            has_more=has_more,
            total_count=len(items),
        )

    async def _get_cuisine_ids(
        self, client: httpx.AsyncClient, names: list[str]
    ) -> list[str]:
        """Resolve cuisine names to ids; any failure yields no ids."""
        try:
            response = await client.get(
                "/rest/v1/cuisine_types",
                params={"select": "id", "name": _in_filter(names)},
                timeout=self._cuisine_timeout_s,
            )
            response.raise_for_status()
            return [str(row["id"]) for row in response.json()]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to resolve cuisine ids for %s: %s", names, e)
            return []

    def _client(self) -> httpx.AsyncClient:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout_s,
            transport=self._transport,
        )


def _match_filter(values: list[str]) -> str:
    """``eq.`` for a single value, ``in.(...)`` for several."""
    if len(values) == 1:
        return f"eq.{values[0]}"
    return _in_filter(values)


def _in_filter(values: list[str]) -> str:
    quoted = ",".join(f'"{v}"' for v in values)
    return f"in.({quoted})"


def _row_cursor(row: Any) -> str | None:
    if isinstance(row, dict) and row.get("created_at"):
        return str(row["created_at"])
    return None


def _parse_items(rows: list[Any]) -> list[MenuItem]:
    """Parse rows, skipping malformed ones and items without an image."""
    items: list[MenuItem] = []
    for row in rows:
        try:
            item = MenuItem.model_validate(row)
        except ValidationError as e:
            row_id = row.get("id", "unknown") if isinstance(row, dict) else "unknown"
            logger.warning("Skipping menu item %s: %s", row_id, e.error_count())
            continue
        if not item.image:
            logger.debug("Skipping menu item %s with empty image", item.id)
            continue
        items.append(item)
    return items
