"""Integration tests for the SQLAlchemy executor over aiosqlite."""

from __future__ import annotations

import pytest
from sqlalchemy import Column, Integer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

from dynamic_filters import (
    BackendExecutionError,
    Between,
    ConfigurationError,
    Contains,
    Equals,
    FieldNotFoundError,
    GreaterOrEqual,
    LessOrEqual,
    PaginationSpec,
    configure,
)
from dynamic_filters.sqlalchemy import SQLAlchemyQueryExecutor

from conftest import USER_COUNT, UserRecord


class GhostBase(DeclarativeBase):
    pass


class GhostRecord(GhostBase):
    """Mapped but never created in the database."""

    __tablename__ = "ghosts"
    id = Column(Integer, primary_key=True)


@pytest.fixture(params=[True, False], ids=["concurrent", "sequential"])
def executor(request, session_factory):
    config = configure(session_factory, concurrent_queries=request.param)
    return SQLAlchemyQueryExecutor(config, UserRecord)


def test_executor_requires_config():
    with pytest.raises(ConfigurationError):
        SQLAlchemyQueryExecutor(None, UserRecord)


@pytest.mark.asyncio
async def test_unfiltered_first_page(executor):
    page = await executor.search([], PaginationSpec())
    assert page.total_elements == USER_COUNT
    assert page.total_pages == 3
    assert page.current_page == 0
    assert len(page.content) == 10


@pytest.mark.asyncio
async def test_last_and_beyond_last_page(executor):
    last = await executor.search([], PaginationSpec(page_number=2, page_size=10))
    assert len(last.content) == 5

    beyond = await executor.search([], PaginationSpec(page_number=7, page_size=10))
    assert beyond.content == []
    assert beyond.total_elements == USER_COUNT
    assert beyond.total_pages == 3
    assert beyond.current_page == 7


@pytest.mark.asyncio
async def test_sorting(executor):
    asc = await executor.search(
        [], PaginationSpec(page_size=3, sort_by="count", sort_direction="asc")
    )
    assert [u.count for u in asc.content] == [1, 2, 3]

    desc = await executor.search([], PaginationSpec(page_size=3, sort_by="count"))
    assert [u.count for u in desc.content] == [25, 24, 23]


@pytest.mark.asyncio
async def test_unknown_sort_field_is_ignored(executor):
    page = await executor.search([], PaginationSpec(sort_by="shoeSize"))
    assert page.total_elements == USER_COUNT


@pytest.mark.asyncio
async def test_substring_and_equality(executor):
    page = await executor.search(
        [Contains("name", "john"), Equals("active", True)],
        PaginationSpec(sort_by="id", sort_direction="ASC"),
    )
    assert [u.id for u in page.content] == [10, 20]
    assert page.total_elements == 2


@pytest.mark.asyncio
async def test_like_wildcards_are_literal(executor):
    page = await executor.search([Contains("name", "%")], PaginationSpec())
    assert page.total_elements == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "predicate, expected",
    [
        (Between("count", 5, 10), 6),
        (GreaterOrEqual("count", 20), 6),
        (LessOrEqual("count", 3), 3),
        (Between("count", 10, 5), 0),
    ],
)
async def test_range_predicates(executor, predicate, expected):
    page = await executor.search([predicate], PaginationSpec(page_size=100))
    assert page.total_elements == expected
    assert len(page.content) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "predicates",
    [
        [],
        [Contains("name", "user")],
        [Equals("active", False), GreaterOrEqual("count", 7)],
        [Equals("account_id", 1), Between("count", 2, 20)],
    ],
)
async def test_count_matches_unbounded_fetch(executor, predicates):
    page = await executor.search(predicates, PaginationSpec(page_size=1000))
    assert page.total_elements == len(page.content)


@pytest.mark.asyncio
async def test_zero_page_size(executor):
    page = await executor.search([], PaginationSpec(page_size=0))
    assert page.content == []
    assert page.total_elements == USER_COUNT
    assert page.total_pages == 0


@pytest.mark.asyncio
async def test_mapper_preserves_order(executor):
    page = await executor.search(
        [Contains("name", "john")],
        PaginationSpec(sort_by="count", sort_direction="ASC"),
        mapper=lambda user: user.name,
    )
    assert page.content == ["John 5", "John 10", "John 15", "John 20", "John 25"]


@pytest.mark.asyncio
async def test_statements_share_the_predicate(executor):
    predicate = executor.translator.translate([Equals("count", 3)])
    fetch = executor.fetch_statement(
        predicate, PaginationSpec(page_number=2, page_size=5, sort_by="name")
    )
    count = executor.count_statement(predicate)

    fetch_sql = str(fetch)
    count_sql = str(count)
    assert "users.count = :count_1" in fetch_sql
    assert "ORDER BY users.name DESC" in fetch_sql
    assert "LIMIT" in fetch_sql and "OFFSET" in fetch_sql
    assert "count(*)" in count_sql
    assert "users.count = :count_1" in count_sql
    assert "ORDER BY" not in count_sql
    assert "LIMIT" not in count_sql


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [True, False])
async def test_backend_failure_is_wrapped(session_factory, concurrent):
    config = configure(session_factory, concurrent_queries=concurrent)
    executor = SQLAlchemyQueryExecutor(config, GhostRecord)
    with pytest.raises(BackendExecutionError) as exc_info:
        await executor.search([], PaginationSpec())
    assert exc_info.value.operation in {"fetch", "count"}
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


@pytest.mark.asyncio
async def test_unmapped_field_fails_before_any_query(session_factory):
    opened = []

    def tracking_factory():
        opened.append(True)
        return session_factory()

    executor = SQLAlchemyQueryExecutor(configure(tracking_factory), UserRecord)
    with pytest.raises(FieldNotFoundError) as exc_info:
        await executor.search([Equals("nam", "John")], PaginationSpec())
    assert "name" in exc_info.value.suggestions
    assert opened == []
