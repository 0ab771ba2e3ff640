"""
SQLAlchemy operator implementations and default registry.

Usage::

    from dynamic_filters.sqlalchemy.operators import DEFAULT_SQLA_REGISTRY

    clause = DEFAULT_SQLA_REGISTRY.apply(PredicateOperator.GE, User.age, 18)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..predicates import PredicateOperator
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class EqualOperator(SQLAlchemyOperator):
    name = PredicateOperator.EQ

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return column == value  # type: ignore[no-any-return]


class ContainsOperator(SQLAlchemyOperator):
    """``LIKE '%needle%'``; ``%`` and ``_`` in the needle match literally."""

    name = PredicateOperator.CONTAINS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return column.contains(value, autoescape=True)  # type: ignore[no-any-return]


class IContainsOperator(ContainsOperator):
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return column.icontains(value, autoescape=True)  # type: ignore[no-any-return]


class BetweenOperator(SQLAlchemyOperator):
    name = PredicateOperator.BETWEEN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        lower, upper = value
        return column.between(lower, upper)  # type: ignore[no-any-return]


class GreaterEqualOperator(SQLAlchemyOperator):
    name = PredicateOperator.GE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return column >= value  # type: ignore[no-any-return]


class LessEqualOperator(SQLAlchemyOperator):
    name = PredicateOperator.LE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return column <= value  # type: ignore[no-any-return]


def build_default_sqla_registry(
    *, case_insensitive_contains: bool = True
) -> SQLAlchemyOperatorRegistry:
    """Create a registry with all built-in SQLAlchemy operators."""
    return SQLAlchemyOperatorRegistry(
        EqualOperator(),
        IContainsOperator() if case_insensitive_contains else ContainsOperator(),
        BetweenOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
    )


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "SQLAlchemyOperatorRegistry",
]
