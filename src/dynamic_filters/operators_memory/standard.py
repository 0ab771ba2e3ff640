"""Equality operator."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..predicates import PredicateOperator


class EqualOperator(MemoryOperator):
    name = PredicateOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)
