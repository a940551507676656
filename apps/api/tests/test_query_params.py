"""Pagination, search and filter normalization tests."""

from __future__ import annotations

import unittest

from app.core.query_params import (
    build_search_filter,
    build_where_clause,
    get_pagination_params,
    parse_int,
    parse_query_filters,
)


class PaginationParamsTests(unittest.TestCase):
    def test_defaults_when_query_is_empty(self) -> None:
        params = get_pagination_params({})
        self.assertEqual((params.page, params.take, params.skip), (1, 20, 0))

    def test_skip_is_page_offset_times_limit(self) -> None:
        for page in (1, 2, 7, 50):
            for limit in (1, 20, 37, 100):
                with self.subTest(page=page, limit=limit):
                    params = get_pagination_params({"page": str(page), "limit": str(limit)})
                    self.assertEqual(params.page, page)
                    self.assertEqual(params.take, limit)
                    self.assertEqual(params.skip, (page - 1) * limit)

    def test_limit_above_maximum_is_clamped(self) -> None:
        for raw in ("101", "250", "100000"):
            with self.subTest(raw=raw):
                self.assertEqual(get_pagination_params({"limit": raw}).take, 100)

    def test_limit_below_one_or_non_numeric_falls_back_to_default(self) -> None:
        for raw in ("0", "-5", "abc", "", None):
            with self.subTest(raw=raw):
                self.assertEqual(get_pagination_params({"limit": raw}).take, 20)

    def test_page_is_clamped_to_one(self) -> None:
        for raw in ("0", "-3", "nope", None):
            with self.subTest(raw=raw):
                params = get_pagination_params({"page": raw, "limit": "10"})
                self.assertEqual(params.page, 1)
                self.assertEqual(params.skip, 0)

    def test_leading_integer_parsing(self) -> None:
        self.assertEqual(parse_int("3abc"), 3)
        self.assertEqual(parse_int("  42"), 42)
        self.assertEqual(parse_int("2.9"), 2)
        self.assertEqual(parse_int("-4"), -4)
        self.assertIsNone(parse_int("abc"))
        self.assertIsNone(parse_int(None))
        self.assertEqual(get_pagination_params({"page": "3abc", "limit": "15.5"}).skip, 30)


class SearchFilterTests(unittest.TestCase):
    def test_empty_search_matches_everything(self) -> None:
        self.assertEqual(build_search_filter("", ["email", "first_name"]), {})
        self.assertEqual(build_search_filter(None, ["email"]), {})

    def test_search_builds_case_insensitive_or_over_fields(self) -> None:
        self.assertEqual(
            build_search_filter("smith", ["first_name", "last_name"]),
            {
                "OR": [
                    {"first_name": {"contains": "smith", "mode": "insensitive"}},
                    {"last_name": {"contains": "smith", "mode": "insensitive"}},
                ]
            },
        )


class WhereClauseTests(unittest.TestCase):
    def test_drops_empty_and_null_values(self) -> None:
        filters = {"a": "", "b": None, "d": "x"}
        self.assertEqual(build_where_clause(filters), {"d": "x"})

    def test_keeps_falsy_non_empty_values(self) -> None:
        self.assertEqual(build_where_clause({"is_active": False, "count": 0}), {"is_active": False, "count": 0})


class QueryFilterTests(unittest.TestCase):
    def test_only_allow_listed_keys_are_copied(self) -> None:
        query = {"status": "ACTIVE", "policy_type": "", "user_id": "someone-else", "page": "2"}
        self.assertEqual(parse_query_filters(query, ["status", "policy_type"]), {"status": "ACTIVE"})
