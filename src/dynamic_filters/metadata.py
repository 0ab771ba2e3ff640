"""
Query-parameter documentation for filter types.

Derives a read-only parameter list from a filter type's field table,
using the same classifier as the criteria builder:

- four standing pagination parameters;
- one plain parameter per filterable field (regular fields and
  filterable identifiers);
- ``<field>From`` / ``<field>To`` for every rangeable field.

Nothing here feeds back into criteria building.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .classifier import classify
from .fields import FieldDescriptor, FieldType, field_table_of
from .request import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, SortDirection

PAGE_NUMBER = "pageNumber"
PAGE_SIZE = "pageSize"
SORT_BY = "sortBy"
SORT_DIRECTION = "sortDirection"
RANGE_FROM_SUFFIX = "From"
RANGE_TO_SUFFIX = "To"

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|_+")


class ParameterLocation(str, Enum):
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"


@dataclass(frozen=True)
class FieldClassificationInfo:
    """Classification of one declared field, for presentation layers."""

    name: str
    declared_type: FieldType
    is_identifier: bool
    is_filterable_identifier: bool
    is_rangeable: bool


@dataclass(frozen=True)
class QueryParameter:
    """A single documented request parameter."""

    name: str
    location: ParameterLocation = ParameterLocation.QUERY
    schema: Mapping[str, Any] = field(default_factory=dict)
    description: str = ""
    default: str | None = None
    required: bool = False

    def to_openapi(self) -> dict[str, Any]:
        """Render as an OpenAPI 3 parameter object."""
        schema = dict(self.schema)
        if self.default is not None:
            schema["default"] = self.default
        return {
            "name": self.name,
            "in": self.location.value,
            "description": self.description,
            "required": self.required,
            "schema": schema,
        }


def describe_fields(filter_cls: type[Any]) -> list[FieldClassificationInfo]:
    out: list[FieldClassificationInfo] = []
    for descriptor in field_table_of(filter_cls).values():
        c = classify(descriptor)
        out.append(
            FieldClassificationInfo(
                name=descriptor.name,
                declared_type=descriptor.field_type,
                is_identifier=c.is_identifier,
                is_filterable_identifier=c.is_filterable_identifier,
                is_rangeable=c.is_rangeable,
            )
        )
    return out


def schema_for(
    field_type: FieldType,
    *,
    integral: bool = False,
    enum_values: Iterable[str] = (),
) -> dict[str, Any]:
    """Map a semantic field type onto a parameter schema."""
    if field_type is FieldType.NUMBER:
        return {"type": "integer" if integral else "number"}
    if field_type is FieldType.BOOLEAN:
        return {"type": "boolean"}
    if field_type is FieldType.TIMESTAMP:
        return {"type": "string", "format": "date-time"}
    if field_type is FieldType.ENUM:
        return {"type": "string", "enum": list(enum_values)}
    if field_type in (FieldType.STRING, FieldType.COLLECTION):
        return {"type": "string"}
    raise ValueError(f"Unsupported field type: {field_type!r}")


def descriptor_schema(descriptor: FieldDescriptor) -> dict[str, Any]:
    return schema_for(
        descriptor.field_type,
        integral=descriptor.integral,
        enum_values=descriptor.enum_values,
    )


def humanize(name: str) -> str:
    """``createdDate`` / ``created_date`` -> ``"created date"``."""
    return " ".join(w.lower() for w in _WORD_BOUNDARY.split(name) if w)


def pagination_parameters() -> list[QueryParameter]:
    return [
        QueryParameter(
            PAGE_NUMBER,
            schema={"type": "integer"},
            description="Page number (0-based)",
            default=str(DEFAULT_PAGE_NUMBER),
        ),
        QueryParameter(
            PAGE_SIZE,
            schema={"type": "integer"},
            description="Number of items per page",
            default=str(DEFAULT_PAGE_SIZE),
        ),
        QueryParameter(
            SORT_BY,
            schema={"type": "string"},
            description="Field to sort by",
        ),
        QueryParameter(
            SORT_DIRECTION,
            schema={"type": "string"},
            description="Sort direction (ASC or DESC)",
            default=SortDirection.DESC.value,
        ),
    ]


def build_parameters(
    filter_cls: type[Any],
    existing: Iterable[QueryParameter] = (),
) -> list[QueryParameter]:
    """
    Document every request parameter accepted for *filter_cls*.

    Non-query entries of *existing* (path variables, headers) are kept
    in front; query entries are replaced by the generated list.
    """
    params = [p for p in existing if p.location is not ParameterLocation.QUERY]
    params.extend(pagination_parameters())

    for descriptor in field_table_of(filter_cls).values():
        c = classify(descriptor)
        if c.is_excluded:
            continue
        words = humanize(descriptor.name)
        schema = descriptor_schema(descriptor)
        params.append(
            QueryParameter(
                descriptor.name, schema=schema, description=f"Filter by {words}"
            )
        )
        if c.is_rangeable:
            params.append(
                QueryParameter(
                    descriptor.name + RANGE_FROM_SUFFIX,
                    schema=schema,
                    description=f"Filter {words} from value",
                )
            )
            params.append(
                QueryParameter(
                    descriptor.name + RANGE_TO_SUFFIX,
                    schema=schema,
                    description=f"Filter {words} to value",
                )
            )
    return params
