"""Tests for flat query-string parsing."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from dynamic_filters import Range, SortDirection, parse_query_params

from conftest import UserFilter


def test_documented_names_round_into_request():
    request = parse_query_params(
        UserFilter,
        {
            "name": "john",
            "active": "true",
            "countFrom": "5",
            "countTo": "10",
            "created_dateFrom": "2024-01-05T00:00:00",
            "pageNumber": "2",
            "pageSize": "5",
            "sortBy": "name",
            "sortDirection": "asc",
            "utm_source": "mail",
        },
    )
    assert request.filters == UserFilter(name="john", active=True)
    assert request.range_filters.get("count") == Range(lower=5, upper=10)
    assert request.range_filters.get("created_date").lower == datetime(2024, 1, 5)
    assert request.pagination.offset == 10
    assert request.pagination.sort_by == "name"
    assert request.pagination.sort_direction is SortDirection.ASC


def test_identifier_ranges_and_blanks_are_ignored():
    request = parse_query_params(
        UserFilter, {"idFrom": "1", "account_idTo": "3", "name": "", "countTo": ""}
    )
    assert request.range_filters is None
    assert request.filters == UserFilter()


def test_multi_valued_params_use_last_value():
    request = parse_query_params(UserFilter, {"name": ["a", "b"], "pageSize": ["3"]})
    assert request.filters.name == "b"
    assert request.pagination.page_size == 3


@pytest.mark.parametrize("raw", ["-1", "abc", None])
def test_bad_pagination_falls_back_to_defaults(raw):
    params = {"pageNumber": raw} if raw is not None else {}
    request = parse_query_params(UserFilter, params)
    assert request.pagination.page_number == 0
    assert request.pagination.page_size == 10
    assert request.pagination.sort_direction is SortDirection.DESC


def test_unparseable_filter_value_raises():
    with pytest.raises(ValidationError):
        parse_query_params(UserFilter, {"count": "many"})
