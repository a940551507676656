"""Normalization of raw query strings into pagination and filter structures."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from app.schemas.envelope import PaginationParams

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int | None:
    """Parse the leading integer of ``value`` (``"3abc"`` -> 3, ``"abc"`` -> None)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def get_pagination_params(query: Mapping[str, Any]) -> PaginationParams:
    page = max(1, parse_int(query.get("page")) or 1)

    limit = parse_int(query.get("limit"))
    if limit is None or limit < 1:
        limit = DEFAULT_PAGE_SIZE
    limit = min(MAX_PAGE_SIZE, limit)

    return PaginationParams(skip=(page - 1) * limit, take=limit, page=page)


def build_search_filter(search: str | None, fields: Sequence[str]) -> dict[str, Any]:
    """Build an OR of case-insensitive substring matches; empty search matches everything."""
    if not search:
        return {}

    return {"OR": [{field: {"contains": search, "mode": "insensitive"}} for field in fields]}


def build_where_clause(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value is not None and value != ""}


def parse_query_filters(query: Mapping[str, Any], allowed_filters: Iterable[str]) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    for name in allowed_filters:
        value = query.get(name)
        if value:
            filters[name] = value
    return filters


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "build_search_filter",
    "build_where_clause",
    "get_pagination_params",
    "parse_int",
    "parse_query_filters",
]
