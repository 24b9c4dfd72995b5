# tests/unit/sources/test_unit_postgrest_source.py — v1
"""Tests for sources/postgrest_source.py: httpx MockTransport, no network."""

from __future__ import annotations

import httpx
import pytest

from menucache.core.errors import RemoteSourceError
from menucache.sources.postgrest_source import PostgrestRemoteSource


def _row(item_id: str, created_at: str, image: str = "https://cdn/x.jpg", **extra):
    row = {
        "id": item_id,
        "restaurant_id": "resto_001",
        "name": f"Dish {item_id}",
        "price": 12.0,
        "category": "fast-food",
        "image": image,
        "created_at": created_at,
    }
    row.update(extra)
    return row


ROWS = [
    _row("a", "2026-02-20T18:00:00+00:00"),
    _row("b", "2026-02-19T18:00:00+00:00"),
    _row("c", "2026-02-18T18:00:00+00:00"),
]


class Recorder:
    """MockTransport handler recording requests and serving canned rows."""

    def __init__(self, rows=None, cuisine_rows=None, status: int = 200):
        self.rows = ROWS if rows is None else rows
        self.cuisine_rows = cuisine_rows or []
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/cuisine_types"):
            return httpx.Response(200, json=self.cuisine_rows)
        return httpx.Response(self.status, json=self.rows)

    def menu_request(self) -> httpx.Request:
        return next(r for r in self.requests if r.url.path.endswith("/menu_items"))


def _source(handler, **kwargs) -> PostgrestRemoteSource:
    return PostgrestRemoteSource(
        base_url="https://db.example.com/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestFetchMenuItems:
    @pytest.mark.asyncio
    async def test_first_page_with_more(self):
        handler = Recorder()
        result = await _source(handler).fetch_menu_items(limit=2)

        assert [i.id for i in result.items] == ["a", "b"]
        assert result.has_more is True
        assert result.total_count == 2
        assert result.next_cursor == "2026-02-19T18:00:00+00:00"

        params = handler.menu_request().url.params
        assert params["limit"] == "3"
        assert params["order"] == "created_at.desc"
        assert params["is_available"] == "eq.true"

    @pytest.mark.asyncio
    async def test_last_page(self):
        result = await _source(Recorder()).fetch_menu_items(limit=10)
        assert len(result.items) == 3
        assert result.has_more is False
        assert result.next_cursor is None

    @pytest.mark.asyncio
    async def test_cursor_survives_skipped_rows(self):
        rows = [
            _row("a", "2026-02-20T18:00:00+00:00", image=""),
            _row("b", "2026-02-19T18:00:00+00:00", image=""),
            _row("c", "2026-02-18T18:00:00+00:00", image=""),
        ]
        result = await _source(Recorder(rows=rows)).fetch_menu_items(limit=2)

        assert result.items == []
        assert result.has_more is True
        assert result.next_cursor == "2026-02-19T18:00:00+00:00"

    @pytest.mark.asyncio
    async def test_auth_headers(self):
        handler = Recorder()
        await _source(handler).fetch_menu_items(limit=1)
        request = handler.menu_request()
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"
        assert str(request.url).startswith("https://db.example.com/rest/v1/menu_items")

    @pytest.mark.asyncio
    async def test_filters_translated(self):
        handler = Recorder()
        await _source(handler).fetch_menu_items(
            limit=5,
            cursor="2026-02-20T18:00:00+00:00",
            query="pizza",
            categories=["fast-food", "street"],
            min_price=5.0,
            max_price=20.0,
        )
        params = handler.menu_request().url.params
        assert params["or"] == "(name.ilike.*pizza*,description.ilike.*pizza*)"
        assert params["category"] == 'in.("fast-food","street")'
        assert params.get_list("price") == ["gte.5.0", "lte.20.0"]
        assert params["created_at"] == "lt.2026-02-20T18:00:00+00:00"

    @pytest.mark.asyncio
    async def test_single_category_uses_eq(self):
        handler = Recorder()
        await _source(handler).fetch_menu_items(limit=5, categories=["fast-food"])
        assert handler.menu_request().url.params["category"] == "eq.fast-food"

    @pytest.mark.asyncio
    async def test_cuisines_resolved_to_ids(self):
        handler = Recorder(cuisine_rows=[{"id": "c1"}, {"id": "c2"}])
        await _source(handler).fetch_menu_items(limit=5, cuisines=["italian", "thai"])

        cuisine_request = handler.requests[0]
        assert cuisine_request.url.params["name"] == 'in.("italian","thai")'
        params = handler.menu_request().url.params
        assert params["cuisine_type_id"] == 'in.("c1","c2")'

    @pytest.mark.asyncio
    async def test_unknown_cuisines_give_empty_page(self):
        handler = Recorder(cuisine_rows=[])
        result = await _source(handler).fetch_menu_items(limit=5, cuisines=["martian"])
        assert result.items == []
        assert result.has_more is False
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_skips_rows_without_image_or_invalid(self):
        rows = [
            _row("a", "2026-02-20T18:00:00+00:00", image=""),
            {"id": "broken"},
            _row("c", "2026-02-18T18:00:00+00:00", variants=[{"size": "L"}]),
        ]
        result = await _source(Recorder(rows=rows)).fetch_menu_items(limit=5)
        assert [i.id for i in result.items] == ["c"]
        assert result.items[0].model_extra == {"variants": [{"size": "L"}]}

    @pytest.mark.asyncio
    async def test_http_error_raises_remote_error(self):
        with pytest.raises(RemoteSourceError) as exc_info:
            await _source(Recorder(status=503)).fetch_menu_items(limit=5)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error_raises_remote_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(RemoteSourceError, match="unreachable"):
            await _source(handler).fetch_menu_items(limit=5)

    @pytest.mark.asyncio
    async def test_non_list_payload(self):
        with pytest.raises(RemoteSourceError, match="JSON array"):
            await _source(Recorder(rows={"message": "nope"})).fetch_menu_items(limit=5)
