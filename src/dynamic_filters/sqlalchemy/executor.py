"""
Paginated query execution over an ``AsyncSession`` factory.

For every request two statements are built from the same translated
predicate: a page fetch (ordered, limited, offset) and a total count
over a subquery of the unpaged selection.  When the config enables
concurrent queries both run at the same time on independent sessions;
if either fails the sibling is cancelled and awaited before the error
propagates, so no partial page is ever assembled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import QueryableAttribute

from ..config import EngineConfig, require_config
from ..exceptions import BackendExecutionError
from ..request import Page, PaginationSpec, SortDirection
from .operators import build_default_sqla_registry
from .translator import SQLAlchemyPredicateTranslator

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from sqlalchemy import ColumnElement, Select

    from ..predicates import AtomicPredicate

E = TypeVar("E")
R = TypeVar("R")

logger = logging.getLogger("dynamic_filters.executor")


class SQLAlchemyQueryExecutor(Generic[E]):
    """
    Execute filtered, paginated queries for one mapped *model*.

    Args:
        config: Engine configuration; its ``session_factory`` must be an
            ``async_sessionmaker`` (or any zero-argument callable
            returning an async session context manager).
        model: SQLAlchemy mapped class.
        translator: Optional translator; by default one is built from
            the config's contains-case setting.
    """

    def __init__(
        self,
        config: EngineConfig | None,
        model: type[E],
        *,
        translator: SQLAlchemyPredicateTranslator | None = None,
    ) -> None:
        self._config = require_config(config)
        self.model = model
        self.translator = translator or SQLAlchemyPredicateTranslator(
            model,
            registry=build_default_sqla_registry(
                case_insensitive_contains=self._config.case_insensitive_contains
            ),
        )

    # -- statements ----------------------------------------------------------

    def fetch_statement(
        self,
        predicate: ColumnElement[bool],
        pagination: PaginationSpec,
    ) -> Select[Any]:
        stmt = select(self.model).where(predicate)
        stmt = self._apply_order_by(stmt, pagination)
        return stmt.limit(pagination.limit).offset(pagination.offset)

    def count_statement(self, predicate: ColumnElement[bool]) -> Select[Any]:
        subquery = select(self.model).where(predicate).subquery()
        return select(func.count()).select_from(subquery)

    def _apply_order_by(
        self, stmt: Select[Any], pagination: PaginationSpec
    ) -> Select[Any]:
        if not pagination.sort_by:
            return stmt
        col = getattr(self.model, pagination.sort_by, None)
        if not isinstance(col, QueryableAttribute):
            logger.warning(
                "Ignoring sort on unknown field '%s' of %s",
                pagination.sort_by,
                self.model.__name__,
            )
            return stmt
        if pagination.sort_direction is SortDirection.ASC:
            return stmt.order_by(asc(col))
        return stmt.order_by(desc(col))

    # -- execution -----------------------------------------------------------

    async def search(
        self,
        predicates: Sequence[AtomicPredicate],
        pagination: PaginationSpec,
        mapper: Callable[[E], R] | None = None,
    ) -> Page[Any]:
        """
        Translate *predicates* and execute them as one page request.

        Raises:
            FieldNotFoundError: A predicate names an unmapped attribute;
                raised during translation, before either query runs.
            BackendExecutionError: Either query failed.
        """
        return await self.execute(
            self.translator.translate(predicates), pagination, mapper
        )

    async def execute(
        self,
        predicate: ColumnElement[bool],
        pagination: PaginationSpec,
        mapper: Callable[[E], R] | None = None,
    ) -> Page[Any]:
        """
        Run the fetch and count for *predicate* and assemble a page.

        Raises:
            BackendExecutionError: Either query failed.
        """
        fetch_stmt = self.fetch_statement(predicate, pagination)
        count_stmt = self.count_statement(predicate)

        if self._config.concurrent_queries:
            rows, total = await self._run_concurrently(fetch_stmt, count_stmt)
        else:
            rows = await self._guard("fetch", self._fetch(fetch_stmt))
            total = await self._guard("count", self._count(count_stmt))

        content = [mapper(row) for row in rows] if mapper is not None else rows
        logger.debug(
            "Fetched %d of %d %s row(s) for page %d",
            len(content),
            total,
            self.model.__name__,
            pagination.page_number,
        )
        return Page.assemble(content, total, pagination)

    async def _run_concurrently(
        self, fetch_stmt: Select[Any], count_stmt: Select[Any]
    ) -> tuple[list[E], int]:
        fetch_task = asyncio.ensure_future(self._guard("fetch", self._fetch(fetch_stmt)))
        count_task = asyncio.ensure_future(self._guard("count", self._count(count_stmt)))
        try:
            rows, total = await asyncio.gather(fetch_task, count_task)
        except BaseException:
            for task in (fetch_task, count_task):
                task.cancel()
            await asyncio.gather(fetch_task, count_task, return_exceptions=True)
            raise
        return cast("list[E]", rows), cast("int", total)

    async def _guard(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await awaitable
        except SQLAlchemyError as exc:
            logger.error(
                "%s query on %s failed: %s", operation, self.model.__name__, exc
            )
            raise BackendExecutionError(operation, str(exc)) from exc

    async def _fetch(self, stmt: Select[Any]) -> list[E]:
        async with self._config.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _count(self, stmt: Select[Any]) -> int:
        async with self._config.session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())
