"""
In-memory predicate translation.

:class:`MemoryTranslator` turns a predicate list into a pure
``candidate -> bool`` callable by dispatching every predicate to the
:class:`MemoryOperator` registered for its operator.  Candidates may be
plain objects or mappings; a missing field reads as ``None``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from .registry import OperatorRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .predicates import AtomicPredicate, PredicateOperator


class MemoryOperator(ABC):
    """Evaluates one operator against a value read from a candidate."""

    name: ClassVar[PredicateOperator]

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool: ...


class MemoryOperatorRegistry(OperatorRegistry[MemoryOperator]):
    backend = "in-memory evaluation"

    def evaluate(
        self,
        name: PredicateOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        return self.resolve(name).evaluate(field_value, condition_value)


class MemoryTranslator:
    """
    Translate predicates into a conjunctive in-memory matcher.

    The matcher holds no reference to any data source, so the same
    callable serves both counting and fetching.
    """

    def __init__(self, registry: MemoryOperatorRegistry) -> None:
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() from operators_memory to create one."
            )
        self._registry = registry

    def translate(
        self, predicates: Sequence[AtomicPredicate]
    ) -> Callable[[Any], bool]:
        bound = [
            (self._registry.resolve(p.op), p.field, p.operand) for p in predicates
        ]

        def matches(candidate: Any) -> bool:
            return all(
                op.evaluate(read_field(candidate, field), operand)
                for op, field, operand in bound
            )

        return matches


def read_field(candidate: Any, name: str) -> Any:
    """Read *name* from a mapping or an object; missing reads as ``None``."""
    if isinstance(candidate, dict):
        return candidate.get(name)
    return getattr(candidate, name, None)
