"""
Request and response shapes.

``FilterRequest`` wraps the caller's filter object, an optional
:class:`~dynamic_filters.ranges.RangeTable` and a :class:`PaginationSpec`.
``Page`` is the assembled response.  Both accept and emit the camelCase
wire names (``pageNumber``, ``rangeFilters``, ``totalElements`` ...)
while exposing snake_case attributes.  Unknown input keys are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fields import FIELD_TABLE_ATTR, FieldTable
from .ranges import RangeTable

F = TypeVar("F")
T = TypeVar("T")

DEFAULT_PAGE_NUMBER = 0
DEFAULT_PAGE_SIZE = 10


class FilterSpec(BaseModel):
    """
    Base class for declarative filter shapes.

    The field descriptor table is computed once, when the subclass is
    created, and reused for every request::

        class UserFilter(FilterSpec):
            id: Annotated[int | None, Identifier()] = None
            name: str | None = None
            created_date: datetime | None = None

    Fields named ``id``, ``*Id`` or ``*_id`` are identifiers and are
    ignored, both as filters and as ranges, unless they are annotated
    with ``FilterableId()``; then they match by equality only.  The
    snake_case ``*_id`` form counts as well, so an unmarked
    ``account_id`` silently filters nothing.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        setattr(cls, FIELD_TABLE_ATTR, FieldTable.from_pydantic(cls))

    @classmethod
    def field_table(cls) -> FieldTable:
        table = cls.__dict__.get(FIELD_TABLE_ATTR)
        if table is None:
            table = FieldTable.from_pydantic(cls)
        return table


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> SortDirection:
        """Case-insensitive; anything unrecognised sorts descending."""
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str) and value.strip().upper() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


class PaginationSpec(BaseModel):
    """
    Page position and ordering.

    A ``page_size`` of zero is accepted: it fetches nothing and reports
    zero pages while still counting every matching row.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    page_number: int = Field(default=DEFAULT_PAGE_NUMBER, ge=0, alias="pageNumber")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=0, alias="pageSize")
    sort_by: str | None = Field(default=None, alias="sortBy")
    sort_direction: SortDirection = Field(
        default=SortDirection.DESC, alias="sortDirection"
    )

    @field_validator("sort_direction", mode="before")
    @classmethod
    def _parse_direction(cls, value: Any) -> SortDirection:
        return SortDirection.parse(value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _blank_sort_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class FilterRequest(BaseModel, Generic[F]):
    """Filter criteria, range filters and pagination for one request."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    filters: F | None = None
    range_filters: RangeTable | None = Field(default=None, alias="rangeFilters")
    pagination: PaginationSpec | None = None

    @classmethod
    def declared_filter_type(cls) -> type[Any] | None:
        """``UserFilter`` for ``FilterRequest[UserFilter]``, else ``None``."""
        args = cls.__pydantic_generic_metadata__["args"]
        if args and isinstance(args[0], type):
            return args[0]
        return None

    def filter_type(self) -> type[Any] | None:
        """The filter class of this request, even when ``filters`` is unset."""
        if self.filters is not None:
            return type(self.filters)
        return self.declared_filter_type()

    def pagination_or_default(
        self, page_size: int = DEFAULT_PAGE_SIZE
    ) -> PaginationSpec:
        if self.pagination is not None:
            return self.pagination
        return PaginationSpec(page_size=page_size)


def total_pages_for(total_elements: int, page_size: int) -> int:
    """``ceil(total / size)``; zero when ``page_size`` is not positive."""
    if page_size <= 0 or total_elements <= 0:
        return 0
    return -(-total_elements // page_size)


class Page(BaseModel, Generic[T]):
    """A slice of a larger result set plus its position metadata."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    content: list[T] = Field(default_factory=list)
    total_elements: int = Field(default=0, ge=0, alias="totalElements")
    total_pages: int = Field(default=0, ge=0, alias="totalPages")
    current_page: int = Field(default=0, alias="currentPage")

    @classmethod
    def assemble(
        cls,
        content: list[T],
        total_elements: int,
        pagination: PaginationSpec,
    ) -> Page[T]:
        """Build a page; ``current_page`` is never clamped to the last page."""
        return cls(
            content=content,
            total_elements=total_elements,
            total_pages=total_pages_for(total_elements, pagination.page_size),
            current_page=pagination.page_number,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the wire field names."""
        return self.model_dump(by_alias=True)
