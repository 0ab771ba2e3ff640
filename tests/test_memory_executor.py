"""Tests for the in-memory executor."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from dynamic_filters import (
    ConfigurationError,
    Contains,
    Equals,
    GreaterOrEqual,
    MemoryQueryExecutor,
    PaginationSpec,
    configure,
    field_table_of,
)


@dataclass
class Product:
    id: int
    name: str
    price: float | None


PRODUCTS = [
    Product(1, "Desk Lamp", 30.0),
    Product(2, "Floor Lamp", 80.0),
    Product(3, "Desk", 150.0),
    Product(4, "Chair", None),
    Product(5, "Lamp Shade", 12.5),
]


@pytest.fixture
def executor():
    config = configure(lambda: PRODUCTS)
    return MemoryQueryExecutor(config, fields=field_table_of(Product))


def test_requires_config():
    with pytest.raises(ConfigurationError):
        MemoryQueryExecutor(None)


@pytest.mark.asyncio
async def test_filter_and_paginate(executor):
    page = await executor.search(
        [Contains("name", "lamp")],
        PaginationSpec(page_size=2, sort_by="price", sort_direction="ASC"),
    )
    assert page.total_elements == 3
    assert page.total_pages == 2
    assert [p.id for p in page.content] == [5, 1]


@pytest.mark.asyncio
async def test_descending_sort_puts_missing_values_last(executor):
    page = await executor.search([], PaginationSpec(sort_by="price"))
    assert [p.id for p in page.content] == [3, 2, 1, 5, 4]


@pytest.mark.asyncio
async def test_unknown_sort_field_keeps_source_order(executor):
    page = await executor.search([], PaginationSpec(sort_by="weight"))
    assert [p.id for p in page.content] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_null_values_never_match_ranges(executor):
    page = await executor.search([GreaterOrEqual("price", 0)], PaginationSpec())
    assert page.total_elements == 4


@pytest.mark.asyncio
async def test_mapper_and_zero_size(executor):
    page = await executor.search(
        [Equals("id", 3)], PaginationSpec(), mapper=lambda p: p.name
    )
    assert page.content == ["Desk"]

    empty = await executor.search([], PaginationSpec(page_size=0))
    assert empty.content == []
    assert empty.total_elements == 5
    assert empty.total_pages == 0


@pytest.mark.asyncio
async def test_dict_rows_without_field_table():
    rows = [{"name": "b"}, {"name": "a"}, {"name": "c"}]
    executor = MemoryQueryExecutor(configure(lambda: rows))
    page = await executor.search(
        [], PaginationSpec(sort_by="name", sort_direction="ASC")
    )
    assert page.content == [{"name": "a"}, {"name": "b"}, {"name": "c"}]
