"""
In-memory paginated query executor.

Serves the same ``search`` / ``execute`` contract as the SQLAlchemy
executor over a plain sequence of objects or dicts, which makes it the
natural backend for unit tests and small reference data sets.  The
configured ``session_factory`` is a zero-argument callable returning
the rows to filter; it is read once per request so count and fetch
observe the same snapshot.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .config import EngineConfig, require_config
from .evaluator import MemoryTranslator, read_field
from .operators_memory import build_default_registry
from .request import Page, PaginationSpec, SortDirection

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .evaluator import MemoryOperatorRegistry
    from .fields import FieldTable
    from .predicates import AtomicPredicate

E = TypeVar("E")
R = TypeVar("R")

logger = logging.getLogger("dynamic_filters.executor")


class MemoryQueryExecutor(Generic[E]):
    """
    Filter, sort and slice rows held in memory.

    Args:
        config: Engine configuration; ``session_factory()`` returns rows.
        fields: Optional field table of the row type, used to recognise
            unknown sort fields.
        registry: Optional operator registry; by default one is built
            from the config's contains-case setting.
    """

    def __init__(
        self,
        config: EngineConfig | None,
        *,
        fields: FieldTable | None = None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._config = require_config(config)
        self._fields = fields
        if registry is None:
            registry = build_default_registry(
                case_insensitive_contains=self._config.case_insensitive_contains
            )
        self.translator = MemoryTranslator(registry)

    async def search(
        self,
        predicates: Sequence[AtomicPredicate],
        pagination: PaginationSpec,
        mapper: Callable[[E], R] | None = None,
    ) -> Page[Any]:
        return await self.execute(
            self.translator.translate(predicates), pagination, mapper
        )

    async def execute(
        self,
        predicate: Callable[[E], bool],
        pagination: PaginationSpec,
        mapper: Callable[[E], R] | None = None,
    ) -> Page[Any]:
        matched = [row for row in self._config.session_factory() if predicate(row)]
        ordered = self._sort(matched, pagination)

        start = pagination.offset
        window = ordered[start : start + pagination.limit]
        content = [mapper(row) for row in window] if mapper is not None else window
        return Page.assemble(content, len(matched), pagination)

    def _sort(self, rows: list[E], pagination: PaginationSpec) -> list[E]:
        name = pagination.sort_by
        if not name:
            return rows
        if not self._is_known(name, rows):
            logger.warning("Ignoring sort on unknown field '%s'", name)
            return rows

        # Rows without a value always trail the sorted ones.
        present = [row for row in rows if read_field(row, name) is not None]
        missing = [row for row in rows if read_field(row, name) is None]
        present.sort(
            key=lambda row: read_field(row, name),
            reverse=pagination.sort_direction is SortDirection.DESC,
        )
        return present + missing

    def _is_known(self, name: str, rows: list[E]) -> bool:
        if self._fields is not None:
            return name in self._fields
        if not rows:
            return True
        sample = rows[0]
        return name in sample if isinstance(sample, dict) else hasattr(sample, name)
