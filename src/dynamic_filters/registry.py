"""
Operator strategy registries.

Both backends look predicates up by :class:`PredicateOperator` and
delegate to exactly one strategy per operator.  Registering a second
strategy for the same operator replaces the first, which is how the
case-sensitive and case-insensitive ``CONTAINS`` variants are swapped.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, ClassVar, Generic, Protocol, TypeVar

if TYPE_CHECKING:
    from .predicates import PredicateOperator


class OperatorStrategy(Protocol):
    name: ClassVar[PredicateOperator]


S = TypeVar("S", bound=OperatorStrategy)


class OperatorRegistry(Generic[S]):
    """Strategies of one backend, keyed by the operator they handle."""

    backend: ClassVar[str] = "this backend"

    def __init__(self, *strategies: S) -> None:
        self._strategies: dict[PredicateOperator, S] = {}
        self.register_all(*strategies)

    def register(self, strategy: S) -> S:
        self._strategies[strategy.name] = strategy
        return strategy

    def register_all(self, *strategies: S) -> None:
        for strategy in strategies:
            self.register(strategy)

    def get(self, name: PredicateOperator) -> S | None:
        return self._strategies.get(name)

    def resolve(self, name: PredicateOperator) -> S:
        """
        Raises:
            ValueError: If no strategy handles *name*.
        """
        strategy = self._strategies.get(name)
        if strategy is None:
            raise ValueError(f"Unsupported operator for {self.backend}: {name}")
        return strategy

    @property
    def supported_operators(self) -> frozenset[PredicateOperator]:
        return frozenset(self._strategies)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def __iter__(self) -> Iterator[S]:
        return iter(self._strategies.values())

    def __len__(self) -> int:
        return len(self._strategies)
