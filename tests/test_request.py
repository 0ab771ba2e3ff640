"""Tests for ranges, request parsing and page arithmetic."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from dynamic_filters import FilterRequest, Page, PaginationSpec, Range, RangeTable
from dynamic_filters.request import SortDirection, total_pages_for

from conftest import UserFilter


@pytest.mark.parametrize(
    "total, size, pages",
    [(95, 10, 10), (100, 10, 10), (1, 10, 1), (0, 10, 0), (0, 0, 0), (5, 0, 0)],
)
def test_total_pages(total, size, pages):
    assert total_pages_for(total, size) == pages


def test_page_number_is_not_clamped():
    page = Page.assemble([], 25, PaginationSpec(page_number=9, page_size=10))
    assert page.current_page == 9
    assert page.total_pages == 3
    assert page.total_elements == 25


def test_page_wire_names():
    page = Page.assemble(["a"], 1, PaginationSpec())
    assert page.to_dict() == {
        "content": ["a"],
        "totalElements": 1,
        "totalPages": 1,
        "currentPage": 0,
    }


def test_pagination_defaults_and_offset():
    spec = PaginationSpec()
    assert (spec.page_number, spec.page_size, spec.sort_by) == (0, 10, None)
    assert spec.sort_direction is SortDirection.DESC
    assert PaginationSpec(page_number=3, page_size=20).offset == 60


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ASC", SortDirection.ASC),
        ("asc", SortDirection.ASC),
        (" Asc ", SortDirection.ASC),
        ("desc", SortDirection.DESC),
        ("sideways", SortDirection.DESC),
        (None, SortDirection.DESC),
    ],
)
def test_sort_direction_parsing(raw, expected):
    assert PaginationSpec(sortDirection=raw).sort_direction is expected


def test_pagination_rejects_negative_values():
    with pytest.raises(ValidationError):
        PaginationSpec(page_number=-1)
    with pytest.raises(ValidationError):
        PaginationSpec(page_size=-5)


def test_blank_sort_field_is_none():
    assert PaginationSpec(sortBy="  ").sort_by is None


def test_request_from_wire_ignores_unknown_fields():
    request = FilterRequest[UserFilter].model_validate(
        {
            "filters": {"name": "jo", "shoeSize": 44},
            "rangeFilters": {"ranges": {"count": {"from": 1, "to": 5}}},
            "pagination": {"pageNumber": 1, "pageSize": 5, "sortBy": "name"},
            "trace": "ignored",
        }
    )
    assert isinstance(request.filters, UserFilter)
    assert request.filters.name == "jo"
    assert request.range_filters.get("count") == Range(lower=1, upper=5)
    assert request.pagination.offset == 5


def test_missing_pagination_uses_defaults():
    request = FilterRequest[UserFilter](filters=UserFilter())
    assert request.pagination_or_default() == PaginationSpec()
    assert request.pagination_or_default(25).page_size == 25


def test_range_accepts_bare_mapping_and_pairs():
    table = RangeTable.model_validate({"count": [1, 2], "created_date": {"to": "x"}})
    assert list(dict(table.items())) == ["count", "created_date"]
    assert table.get("count") == Range(lower=1, upper=2)
    assert table.get("created_date").upper == "x"
    assert table.get("missing") is None


def test_range_pair_must_have_two_bounds():
    with pytest.raises(ValidationError):
        Range.model_validate([1, 2, 3])


def test_range_serializes_wire_names():
    assert Range(lower=1).model_dump(by_alias=True) == {"from": 1, "to": None}
    assert Range().is_empty


def test_range_coercion_uses_filter_annotations():
    table = RangeTable.of(
        count=("3", None), created_date=("2024-01-05T00:00:00", None), ghost=("a", "b")
    ).coerce(UserFilter)
    assert table.get("count").lower == 3
    assert table.get("created_date").lower == datetime(2024, 1, 5)
    assert table.get("ghost") == Range(lower="a", upper="b")
