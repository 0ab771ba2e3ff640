"""
Atomic predicates produced by the criteria builder.

Each predicate is an immutable, backend-neutral condition over one
field.  Predicates serialise to the ``{"op", "attr", "val"}`` shape so
they can be logged or shipped across process boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class PredicateOperator(str, Enum):
    """Operators an atomic predicate can carry."""

    EQ = "="
    CONTAINS = "contains"
    BETWEEN = "between"
    GE = ">="
    LE = "<="

    # Logical
    AND = "and"


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any

    op: ClassVar[PredicateOperator] = PredicateOperator.EQ

    @property
    def operand(self) -> Any:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.field, "val": self.value}


@dataclass(frozen=True)
class Contains:
    """Substring match; case sensitivity is chosen by the translator."""

    field: str
    substring: str

    op: ClassVar[PredicateOperator] = PredicateOperator.CONTAINS

    @property
    def operand(self) -> str:
        return self.substring

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.field, "val": self.substring}


@dataclass(frozen=True)
class Between:
    """Inclusive on both ends.  ``lower > upper`` is not corrected."""

    field: str
    lower: Any
    upper: Any

    op: ClassVar[PredicateOperator] = PredicateOperator.BETWEEN

    @property
    def operand(self) -> tuple[Any, Any]:
        return (self.lower, self.upper)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "attr": self.field,
            "val": [self.lower, self.upper],
        }


@dataclass(frozen=True)
class GreaterOrEqual:
    field: str
    lower: Any

    op: ClassVar[PredicateOperator] = PredicateOperator.GE

    @property
    def operand(self) -> Any:
        return self.lower

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.field, "val": self.lower}


@dataclass(frozen=True)
class LessOrEqual:
    field: str
    upper: Any

    op: ClassVar[PredicateOperator] = PredicateOperator.LE

    @property
    def operand(self) -> Any:
        return self.upper

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.field, "val": self.upper}


AtomicPredicate = Union[Equals, Contains, Between, GreaterOrEqual, LessOrEqual]


def conjunction_to_dict(predicates: list[AtomicPredicate]) -> dict[str, Any]:
    """Serialise a predicate list as a single AND node."""
    return {
        "op": PredicateOperator.AND.value,
        "conditions": [p.to_dict() for p in predicates],
    }
