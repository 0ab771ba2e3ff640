"""SQLAlchemy operator strategies: predicate operator -> ``ColumnElement[bool]``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ..registry import OperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from ..predicates import PredicateOperator


class SQLAlchemyOperator(ABC):
    """
    Compiles one operator into a filter clause over a mapped attribute.

    ``value`` is the predicate operand, a ``(lower, upper)`` pair for
    ``BETWEEN``.
    """

    name: ClassVar[PredicateOperator]

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]: ...


class SQLAlchemyOperatorRegistry(OperatorRegistry[SQLAlchemyOperator]):
    backend = "SQLAlchemy"

    def apply(
        self,
        name: PredicateOperator,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        return self.resolve(name).apply(column, value)
