"""Inclusive bound operators.  A missing field value never matches."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..predicates import PredicateOperator


class BetweenOperator(MemoryOperator):
    name = PredicateOperator.BETWEEN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        lower, upper = condition_value
        return bool(lower <= field_value <= upper)


class GreaterEqualOperator(MemoryOperator):
    name = PredicateOperator.GE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value is not None and bool(field_value >= condition_value)


class LessEqualOperator(MemoryOperator):
    name = PredicateOperator.LE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value is not None and bool(field_value <= condition_value)
