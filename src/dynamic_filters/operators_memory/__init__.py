"""
In-memory operator implementations.

Usage::

    from dynamic_filters.operators_memory import build_default_registry

    registry = build_default_registry()
    registry.evaluate(PredicateOperator.EQ, actual, expected)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .range import BetweenOperator, GreaterEqualOperator, LessEqualOperator
from .standard import EqualOperator
from .string import ContainsOperator, IContainsOperator


def build_default_registry(
    *, case_insensitive_contains: bool = True
) -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    ``case_insensitive_contains`` selects the substring strategy
    registered for :attr:`PredicateOperator.CONTAINS`.
    """
    return MemoryOperatorRegistry(
        EqualOperator(),
        IContainsOperator() if case_insensitive_contains else ContainsOperator(),
        BetweenOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
    )


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
