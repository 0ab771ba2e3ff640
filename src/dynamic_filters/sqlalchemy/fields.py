"""Derive a :class:`FieldTable` from a SQLAlchemy mapped class."""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect

from ..fields import FieldDescriptor, FieldTable


def fields_from_model(model: type[Any]) -> FieldTable:
    """
    Describe every mapped column attribute of *model*.

    Primary-key columns carry the identifier marker; column types the
    dialect cannot map to a Python type are described as strings.
    """
    descriptors: list[FieldDescriptor] = []
    for attr in inspect(model).column_attrs:
        column = attr.columns[0]
        try:
            python_type: Any = column.type.python_type
        except NotImplementedError:
            python_type = str
        descriptor = FieldDescriptor.from_annotation(attr.key, python_type)
        if getattr(column, "primary_key", False):
            descriptor = FieldDescriptor(
                name=descriptor.name,
                field_type=descriptor.field_type,
                is_primary_key=True,
                integral=descriptor.integral,
                enum_values=descriptor.enum_values,
            )
        descriptors.append(descriptor)
    return FieldTable(model.__name__, descriptors)
