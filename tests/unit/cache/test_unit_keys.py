# tests/unit/cache/test_unit_keys.py — v1
"""Tests for cache/keys.py: deterministic key construction."""

from __future__ import annotations

from menucache.cache.keys import build_cache_key
from menucache.core.models import PriceRange


class TestBuildCacheKey:
    def test_no_filters(self):
        assert build_cache_key() == "menu_items:::::"

    def test_all_filters(self):
        key = build_cache_key(
            "pizza",
            {"fast-food", "italian-classics"},
            {"italian"},
            PriceRange(start=5, end=20.5),
        )
        assert key == "menu_items:pizza:fast-food,italian-classics:italian:5.0:20.5"

    def test_set_order_is_irrelevant(self):
        a = build_cache_key("q", ["b", "c", "a"], ["z", "y"])
        b = build_cache_key("q", ["c", "a", "b"], ["y", "z"])
        assert a == b

    def test_duplicates_collapse(self):
        assert build_cache_key(categories=["a", "a", "b"]) == build_cache_key(
            categories={"a", "b"}
        )

    def test_empty_set_equals_absent(self):
        assert build_cache_key(categories=set()) == build_cache_key(categories=None)

    def test_integer_and_float_bounds_match(self):
        assert build_cache_key(price_range=PriceRange(start=10, end=30)) == (
            build_cache_key(price_range=PriceRange(start=10.0, end=30.0))
        )

    def test_same_value_in_different_segments_differs(self):
        keys = {
            build_cache_key(query="pizza"),
            build_cache_key(categories={"pizza"}),
            build_cache_key(cuisines={"pizza"}),
        }
        assert len(keys) == 3

    def test_member_containing_separator_does_not_collide(self):
        assert build_cache_key(categories=["x,y"]) != build_cache_key(
            categories=["x", "y"]
        )

    def test_query_containing_separator_does_not_shift_segments(self):
        assert build_cache_key(query="a:b") != build_cache_key(
            query="a", categories={"b"}
        )

    def test_escaped_member_is_readable(self):
        assert build_cache_key(categories={"x,y"}) == "menu_items::x%2Cy:::"
