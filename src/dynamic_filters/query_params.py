"""Flat query params -> ``FilterRequest``, using the documented names."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .classifier import classify
from .metadata import (
    PAGE_NUMBER,
    PAGE_SIZE,
    RANGE_FROM_SUFFIX,
    RANGE_TO_SUFFIX,
    SORT_BY,
    SORT_DIRECTION,
)
from .ranges import Range, RangeTable
from .request import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    FilterRequest,
    FilterSpec,
    PaginationSpec,
)

logger = logging.getLogger("dynamic_filters.query_params")


def parse_query_params(
    filter_cls: type[FilterSpec],
    params: Mapping[str, Any],
) -> FilterRequest[Any]:
    """
    Build a request from ``pageNumber``, ``pageSize``, ``sortBy``,
    ``sortDirection``, ``<field>``, ``<field>From`` and ``<field>To``.

    Multi-valued params use their last value; blank values count as
    absent; unknown keys are ignored.  Filter values are validated by
    *filter_cls*, so an unparseable value raises
    ``pydantic.ValidationError``.
    """
    table = filter_cls.field_table()
    flat = {k: v for k, v in ((k, _last(v)) for k, v in params.items()) if v != ""}

    filters: dict[str, Any] = {}
    bounds: dict[str, dict[str, Any]] = {}
    for key, value in flat.items():
        if key in table:
            filters[key] = value
            continue
        name, bound = _split_range_key(key)
        descriptor = table.get(name) if name else None
        if descriptor is None or not classify(descriptor).is_rangeable:
            logger.debug("Ignoring query parameter %s", key)
            continue
        bounds.setdefault(name, {})[bound] = value

    ranges = RangeTable(
        ranges={name: Range(**b) for name, b in bounds.items()}
    ).coerce(filter_cls)

    pagination = PaginationSpec(
        page_number=_int_param(flat.get(PAGE_NUMBER), DEFAULT_PAGE_NUMBER),
        page_size=_int_param(flat.get(PAGE_SIZE), DEFAULT_PAGE_SIZE),
        sort_by=flat.get(SORT_BY),
        sort_direction=flat.get(SORT_DIRECTION),
    )
    return FilterRequest(
        filters=filter_cls.model_validate(filters),
        range_filters=ranges if len(ranges) else None,
        pagination=pagination,
    )


def _last(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[-1] if value else ""
    return value


def _split_range_key(key: str) -> tuple[str, str]:
    if key.endswith(RANGE_FROM_SUFFIX):
        return key[: -len(RANGE_FROM_SUFFIX)], "lower"
    if key.endswith(RANGE_TO_SUFFIX):
        return key[: -len(RANGE_TO_SUFFIX)], "upper"
    return "", ""


def _int_param(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default
