"""
RestBuddy: Query Options Tests
================================

What we test:
    ✅ Order parsing: ascending, descending, unknown fields silently dropped
    ✅ Pagination: limit/offset arithmetic and the max_items clamp
    ✅ QueryOptions renders into a SELECT statement
"""

import pytest
from sqlalchemy import select

from restbuddy.models import User
from restbuddy.services.query_options import (
    OrderSpec,
    QueryOptions,
    build_query_options,
    parse_order,
    parse_pagination,
)


class TestParseOrder:

    def test_descending(self, users_schema):
        order = parse_order("-name", users_schema)
        assert order == OrderSpec("name", True)
        assert str(order) == "name DESC"

    def test_ascending(self, users_schema):
        order = parse_order("name", users_schema)
        assert str(order) == "name"
        assert order.descending is False

    @pytest.mark.parametrize("value", ["bogus", "-bogus", "-", "posts", "--name"])
    def test_unknown_field_is_none(self, users_schema, value):
        assert parse_order(value, users_schema) is None

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_is_none(self, users_schema, value):
        assert parse_order(value, users_schema) is None


class TestParsePagination:

    def test_items_and_page(self):
        assert parse_pagination("10", "2", 100) == (10, 20)

    def test_items_without_page(self):
        assert parse_pagination("10", None, 100) == (10, None)

    def test_items_zero_means_no_limit_no_offset(self):
        assert parse_pagination("0", "3", 100) == (None, None)

    def test_clamped_to_default_max(self):
        assert parse_pagination("500", None, 100) == (100, None)

    def test_clamped_to_configured_max(self):
        assert parse_pagination("500", "1", 25) == (25, 25)

    @pytest.mark.parametrize("items", [None, "", "ten", "-5", "1.5"])
    def test_invalid_items(self, items):
        assert parse_pagination(items, "1", 100) == (None, None)

    @pytest.mark.parametrize("page", [None, "", "x", "-1", "0"])
    def test_invalid_or_first_page_has_no_offset(self, page):
        assert parse_pagination("10", page, 100) == (10, None)

    def test_huge_page_offset_is_capped(self):
        limit, offset = parse_pagination("10", "99999999999999999999999", 100)
        assert limit == 10
        assert offset == 2 ** 63 - 1


class TestBuildQueryOptions:

    def test_collects_everything(self, users_schema):
        options = build_query_options(
            query_params={"order": "-age", "items": "2", "page": "1", "active": "true"},
            path_params={},
            schema=users_schema,
            max_items=100,
            transformers={},
        )
        assert str(options.order) == "age DESC"
        assert (options.limit, options.offset) == (2, 2)
        assert options.where is not None

    def test_apply_to_select(self, users_schema):
        options = QueryOptions(order=OrderSpec("name", True), limit=5, offset=10,
                               where=User.id == 1)
        rendered = str(options.apply(select(User), users_schema).compile(
            compile_kwargs={"literal_binds": True}
        ))
        assert "WHERE users.id = 1" in rendered
        assert "ORDER BY users.name DESC" in rendered
        assert "LIMIT 5" in rendered
        assert "OFFSET 10" in rendered

    def test_empty_options_leave_select_alone(self, users_schema):
        stmt = QueryOptions().apply(select(User), users_schema)
        rendered = str(stmt)
        assert "WHERE" not in rendered
        assert "ORDER BY" not in rendered
        assert "LIMIT" not in rendered
