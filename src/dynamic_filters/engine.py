"""
Filter engine facade.

``FilterEngine`` holds the one-time configuration and hands out
``GenericFilter`` instances bound to an entity type, a backend executor
and an optional result mapper::

    engine = FilterEngine()
    engine.configure(async_sessionmaker(db_engine, expire_on_commit=False))

    users = engine.create_filter(UserRecord, mapper=UserDTO.from_record)
    page = await users.filter(
        FilterRequest[UserFilter](
            filters=UserFilter(name="John"),
            pagination=PaginationSpec(page_size=20),
        )
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from .builder import Criteria, CriteriaBuilder
from .config import EngineConfig, configure, require_config
from .exceptions import ConfigurationError
from .fields import FieldTable, field_table_of
from .memory import MemoryQueryExecutor
from .sqlalchemy import SQLAlchemyQueryExecutor, fields_from_model

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .predicates import AtomicPredicate
    from .request import FilterRequest, Page, PaginationSpec

E = TypeVar("E")
R = TypeVar("R")

logger = logging.getLogger("dynamic_filters.engine")


class QueryExecutor(Protocol):
    """Anything that can run predicates as one paginated query."""

    async def search(
        self,
        predicates: Sequence[AtomicPredicate],
        pagination: PaginationSpec,
        mapper: Callable[[Any], Any] | None = None,
    ) -> Page[Any]: ...


class GenericFilter(Generic[E, R]):
    """
    Filter one entity type: build criteria, execute, map, paginate.

    Args:
        config: Engine configuration.
        executor: Backend executor for the entity.
        target: Field table range names are resolved against.
        filter_cls: Filter type used when a request does not declare
            one, e.g. a bare ``FilterRequest`` without ``filters``.
        mapper: Optional entity -> result transform.
    """

    def __init__(
        self,
        config: EngineConfig | None,
        executor: QueryExecutor,
        *,
        target: FieldTable | None = None,
        filter_cls: type[Any] | None = None,
        mapper: Callable[[E], R] | None = None,
    ) -> None:
        self._config = require_config(config)
        self._executor = executor
        self._builder = CriteriaBuilder(target)
        self._filter_cls = filter_cls
        self._mapper = mapper

    def criteria(self, request: FilterRequest[Any]) -> Criteria:
        """
        The predicates *request* translates to, without executing.

        Range names and bounds are resolved against the request's filter
        type: the ``filters`` instance, the ``FilterRequest[F]`` argument
        or the filter class bound at creation, in that order.
        """
        filter_type = request.filter_type() or self._filter_cls
        return self._builder.build(
            request.filters, request.range_filters, filter_type=filter_type
        )

    async def filter(self, request: FilterRequest[Any]) -> Page[Any]:
        """
        Execute *request* and return a consistent page.

        Raises:
            FieldNotFoundError: A predicate names a field the backend model
                does not map; raised before any query runs.
            pydantic.ValidationError: A range bound does not fit the
                declared field type.
            BackendExecutionError: The fetch or count query failed.
        """
        if request.pagination is None:
            logger.info("No pagination supplied, using defaults")
        pagination = request.pagination_or_default(self._config.default_page_size)
        logger.info("pagination request is %s", pagination)

        criteria = self.criteria(request)
        for diagnostic in criteria.diagnostics:
            logger.debug("Dropped field %s: %s", diagnostic.field, diagnostic.reason)

        page = await self._executor.search(criteria, pagination, self._mapper)
        logger.info(
            "Assembled page %d/%d with %d of %d element(s)",
            page.current_page,
            page.total_pages,
            len(page.content),
            page.total_elements,
        )
        return page


class FilterEngine:
    """Entry point holding the configuration shared by every filter."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config

    @property
    def is_configured(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> EngineConfig:
        return require_config(self._config)

    def configure(self, session_factory: Any, **options: Any) -> EngineConfig:
        """
        Set the data-access handle; allowed exactly once.

        Raises:
            ConfigurationError: Handle missing or engine already configured.
        """
        if self._config is not None:
            raise ConfigurationError("Filter engine is already configured")
        self._config = configure(session_factory, **options)
        logger.info("Filter engine configured")
        return self._config

    def create_filter(
        self,
        model: type[E],
        mapper: Callable[[E], R] | None = None,
        *,
        filter_cls: type[Any] | None = None,
    ) -> GenericFilter[E, R]:
        """Filter over a SQLAlchemy mapped *model*."""
        config = self.config
        return GenericFilter(
            config,
            SQLAlchemyQueryExecutor(config, model),
            target=fields_from_model(model),
            filter_cls=filter_cls,
            mapper=mapper,
        )

    def create_memory_filter(
        self,
        entity: type[E] | None = None,
        mapper: Callable[[E], R] | None = None,
        *,
        filter_cls: type[Any] | None = None,
    ) -> GenericFilter[E, R]:
        """
        Filter over the rows returned by the configured session factory.

        *entity* (a dataclass or pydantic model) describes the rows; when
        omitted, range names resolve against the request's filter type.
        """
        config = self.config
        target = field_table_of(entity) if entity is not None else None
        return GenericFilter(
            config,
            MemoryQueryExecutor(config, fields=target),
            target=target,
            filter_cls=filter_cls,
            mapper=mapper,
        )
