"""Substring operators; both register under ``CONTAINS``."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..predicates import PredicateOperator


class ContainsOperator(MemoryOperator):
    name = PredicateOperator.CONTAINS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return str(condition_value) in str(field_value)


class IContainsOperator(ContainsOperator):
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return str(condition_value).casefold() in str(field_value).casefold()
