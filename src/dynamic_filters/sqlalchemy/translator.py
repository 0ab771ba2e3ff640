"""
Translate atomic predicates into a single SQLAlchemy boolean expression.

The translator is bound to a mapped model but to no session, so one
translated expression is shared by the count and the fetch statement.
An empty predicate list translates to ``true()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, inspect, true
from sqlalchemy.orm import QueryableAttribute

from ..exceptions import FieldNotFoundError
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement

    from ..predicates import AtomicPredicate
    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("dynamic_filters.sqlalchemy")


class SQLAlchemyPredicateTranslator:
    """
    Compile predicates against *model*'s mapped attributes.

    Args:
        model: SQLAlchemy mapped class.
        registry: Optional operator registry; falls back to
            ``DEFAULT_SQLA_REGISTRY``.
    """

    def __init__(
        self,
        model: type[Any],
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self._registry = registry if registry is not None else DEFAULT_SQLA_REGISTRY

    def translate(self, predicates: Sequence[AtomicPredicate]) -> ColumnElement[bool]:
        if not predicates:
            return cast("ColumnElement[bool]", true())
        clauses = [
            self._registry.apply(p.op, self.column(p.field), p.operand)
            for p in predicates
        ]
        expr = clauses[0] if len(clauses) == 1 else and_(*clauses)
        logger.debug("Translated %d predicate(s) on %s", len(clauses), self.model.__name__)
        return expr

    def column(self, name: str) -> Any:
        """
        Resolve *name* to a queryable mapped attribute.

        Raises:
            FieldNotFoundError: *name* is not a mapped attribute.
        """
        attr = getattr(self.model, name, None)
        if not isinstance(attr, QueryableAttribute):
            raise FieldNotFoundError(
                name, self.model.__name__, mapped_attribute_names(self.model)
            )
        return attr


def mapped_attribute_names(model: type[Any]) -> list[str]:
    return [attr.key for attr in inspect(model).column_attrs]
