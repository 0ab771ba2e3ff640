"""
Static field-descriptor tables.

A filter type is described once, when it is declared, by a
:class:`FieldTable`: an ordered, immutable mapping from field name to
:class:`FieldDescriptor`.  The classifier and the criteria builder work
exclusively over these tables, never over live class introspection.

Markers are attached with ``typing.Annotated``::

    class OrderFilter(FilterSpec):
        id: Annotated[int | None, Identifier()] = None
        customer_id: Annotated[int | None, FilterableId()] = None
        reference: str | None = None
"""

from __future__ import annotations

import dataclasses
import datetime
import types
import typing
from collections import abc
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

_COLLECTION_ORIGINS: frozenset[Any] = frozenset(
    {list, set, tuple, frozenset, abc.Sequence, abc.Set, abc.Collection}
)

_TEMPORAL_TYPES: tuple[type, ...] = (datetime.date, datetime.time)


class FieldType(str, Enum):
    """Closed set of semantic field types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    ENUM = "enum"
    COLLECTION = "collection"


@dataclass(frozen=True)
class Identifier:
    """Marks a field as the primary key of the filtered entity."""


@dataclass(frozen=True)
class FilterableId:
    """Opts an identifier field back into equality filtering (never ranges)."""


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Registration-time description of one filter dimension.

    Attributes:
        name: Attribute name on the filter / entity type.
        field_type: Semantic type used for classification and schemas.
        is_primary_key: Carries the :class:`Identifier` marker.
        is_filterable_id: Carries the :class:`FilterableId` marker.
        integral: ``True`` for whole-number ``NUMBER`` fields.
        enum_values: Allowed values for ``ENUM`` fields.
    """

    name: str
    field_type: FieldType
    is_primary_key: bool = False
    is_filterable_id: bool = False
    integral: bool = False
    enum_values: tuple[str, ...] = ()

    @classmethod
    def from_annotation(
        cls,
        name: str,
        annotation: Any,
        metadata: tuple[Any, ...] = (),
    ) -> FieldDescriptor:
        """Describe *name* from its type annotation and marker metadata."""
        base, extras = _strip_annotated(annotation)
        markers = tuple(metadata) + extras
        field_type, integral, enum_values = infer_field_type(base)
        return cls(
            name=name,
            field_type=field_type,
            is_primary_key=_has_marker(markers, Identifier),
            is_filterable_id=_has_marker(markers, FilterableId),
            integral=integral,
            enum_values=enum_values,
        )


class FieldTable(Mapping[str, FieldDescriptor]):
    """Ordered, read-only mapping of field name -> :class:`FieldDescriptor`."""

    __slots__ = ("_descriptors", "owner")

    def __init__(self, owner: str, descriptors: list[FieldDescriptor]) -> None:
        self.owner = owner
        self._descriptors: dict[str, FieldDescriptor] = {
            d.name: d for d in descriptors
        }

    def __getitem__(self, name: str) -> FieldDescriptor:
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"FieldTable({self.owner!r}, {list(self._descriptors)!r})"

    def descriptors(self) -> list[FieldDescriptor]:
        return list(self._descriptors.values())

    # -- factories -----------------------------------------------------------

    @classmethod
    def from_pydantic(cls, model: type[Any]) -> FieldTable:
        """Build a table from a pydantic v2 model's declared fields."""
        descriptors: list[FieldDescriptor] = []
        for name, info in model.model_fields.items():
            if _is_excluded_name(name) or info.exclude:
                continue
            descriptors.append(
                FieldDescriptor.from_annotation(
                    name, info.annotation, tuple(info.metadata)
                )
            )
        return cls(model.__name__, descriptors)

    @classmethod
    def from_dataclass(cls, klass: type[Any]) -> FieldTable:
        """Build a table from a dataclass (``ClassVar`` fields never appear)."""
        if not dataclasses.is_dataclass(klass):
            raise TypeError(f"{klass.__name__} is not a dataclass")
        hints = typing.get_type_hints(klass, include_extras=True)
        descriptors = [
            FieldDescriptor.from_annotation(f.name, hints.get(f.name, Any))
            for f in dataclasses.fields(klass)
            if not _is_excluded_name(f.name)
        ]
        return cls(klass.__name__, descriptors)


FIELD_TABLE_ATTR = "__field_table__"


def register_filter(klass: type[Any]) -> type[Any]:
    """
    Class decorator attaching a :class:`FieldTable` to a dataclass or
    pydantic model at declaration time.

    ``FilterSpec`` subclasses are registered automatically.
    """
    setattr(klass, FIELD_TABLE_ATTR, _table_for_class(klass))
    return klass


def field_table_of(obj: Any) -> FieldTable:
    """Return the registered table for a filter instance or class."""
    klass = obj if isinstance(obj, type) else type(obj)
    table = klass.__dict__.get(FIELD_TABLE_ATTR)
    if isinstance(table, FieldTable):
        return table
    return _table_for_class(klass)


def _table_for_class(klass: type[Any]) -> FieldTable:
    if dataclasses.is_dataclass(klass):
        return FieldTable.from_dataclass(klass)
    if hasattr(klass, "model_fields"):
        return FieldTable.from_pydantic(klass)
    raise TypeError(
        f"Cannot describe filter type {klass.__name__}: "
        f"use a FilterSpec subclass, a pydantic model or a dataclass"
    )


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------


def infer_field_type(annotation: Any) -> tuple[FieldType, bool, tuple[str, ...]]:
    """
    Map a Python annotation onto the closed :class:`FieldType` set.

    Returns ``(field_type, integral, enum_values)``.  Anything not
    recognised is treated as ``STRING``.
    """
    tp, _ = _strip_annotated(annotation)
    tp = _unwrap_optional(tp)

    origin = get_origin(tp)
    if origin in _COLLECTION_ORIGINS or tp in _COLLECTION_ORIGINS:
        return FieldType.COLLECTION, False, ()

    if not isinstance(tp, type):
        return FieldType.STRING, False, ()

    if issubclass(tp, Enum):
        return FieldType.ENUM, False, tuple(str(m.value) for m in tp)
    if issubclass(tp, bool):
        return FieldType.BOOLEAN, False, ()
    if issubclass(tp, int):
        return FieldType.NUMBER, True, ()
    if issubclass(tp, (float, Decimal)):
        return FieldType.NUMBER, False, ()
    if issubclass(tp, _TEMPORAL_TYPES):
        return FieldType.TIMESTAMP, False, ()
    if issubclass(tp, (list, set, tuple, frozenset)):
        return FieldType.COLLECTION, False, ()
    return FieldType.STRING, False, ()


def _strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        return base, tuple(extras)
    return annotation, ()


def _unwrap_optional(tp: Any) -> Any:
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            inner, _ = _strip_annotated(args[0])
            return _unwrap_optional(inner)
    return tp


def _has_marker(markers: tuple[Any, ...], marker_cls: type) -> bool:
    return any(m is marker_cls or isinstance(m, marker_cls) for m in markers)


def _is_excluded_name(name: str) -> bool:
    return name.startswith("_")
