"""
Criteria builder: filter object + range table -> ordered predicates.

Regular filters are processed in field declaration order, range
entries in insertion order; the result is deterministic for a given
input.  Per-field problems never fail the build: the field is dropped,
a :class:`Diagnostic` is recorded on the returned :class:`Criteria` and
the problem is logged.

Example::

    criteria = CriteriaBuilder().build(
        UserFilter(name="John", active=True),
        RangeTable.of(created_date=(t0, t1)),
    )
    # -> [Contains(name, "John"), Equals(active, True),
    #     Between(created_date, t0, t1)]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, overload

from .classifier import classify
from .exceptions import FieldAccessError, FilterError, UnknownRangeFieldError
from .fields import FieldTable, field_table_of
from .predicates import (
    AtomicPredicate,
    Between,
    Contains,
    Equals,
    GreaterOrEqual,
    LessOrEqual,
    conjunction_to_dict,
)

if TYPE_CHECKING:
    from .ranges import Range, RangeTable

logger = logging.getLogger("dynamic_filters.criteria")


@dataclass(frozen=True)
class Diagnostic:
    """Why a field contributed nothing to the criteria."""

    field: str
    reason: str
    error: str | None = None

    @classmethod
    def from_error(cls, field: str, exc: FilterError) -> Diagnostic:
        return cls(field=field, reason=str(exc), error=type(exc).__name__)


class Criteria(Sequence[AtomicPredicate]):
    """Immutable predicate sequence plus the diagnostics of dropped fields."""

    __slots__ = ("_predicates", "diagnostics")

    def __init__(
        self,
        predicates: Sequence[AtomicPredicate] = (),
        diagnostics: Sequence[Diagnostic] = (),
    ) -> None:
        self._predicates: tuple[AtomicPredicate, ...] = tuple(predicates)
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)

    @overload
    def __getitem__(self, index: int) -> AtomicPredicate: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[AtomicPredicate]: ...

    def __getitem__(self, index: int | slice) -> Any:
        return self._predicates[index]

    def __len__(self) -> int:
        return len(self._predicates)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Criteria):
            return self._predicates == other._predicates
        if isinstance(other, (list, tuple)):
            return list(self._predicates) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._predicates)

    def __repr__(self) -> str:
        return f"Criteria({list(self._predicates)!r})"

    @property
    def matches_everything(self) -> bool:
        return not self._predicates

    def to_dict(self) -> dict[str, Any]:
        return conjunction_to_dict(list(self._predicates))


class CriteriaBuilder:
    """
    Translate a filter object and a :class:`RangeTable` into
    :class:`Criteria`.

    Args:
        target: Field table range names are resolved against.  Defaults
            to the declared filter type's table; per-call ``target`` wins.
    """

    def __init__(self, target: FieldTable | None = None) -> None:
        self._target = target

    def build(
        self,
        filters: Any | None,
        ranges: RangeTable | None = None,
        *,
        target: FieldTable | None = None,
        filter_type: type[Any] | None = None,
    ) -> Criteria:
        """
        Build the criteria for *filters* and *ranges*.

        *filter_type* is the declared filter class; it is required to
        resolve range entries when *filters* is ``None``.  Bounds are
        validated against its annotations when it is a pydantic model.

        Raises:
            pydantic.ValidationError: A range bound does not fit the
                declared field type.
        """
        predicates: list[AtomicPredicate] = []
        diagnostics: list[Diagnostic] = []

        if filter_type is None and filters is not None:
            filter_type = type(filters)
        declared = field_table_of(filter_type) if filter_type is not None else None

        if filters is not None:
            predicates.extend(
                self._regular_predicates(filters, field_table_of(filters), diagnostics)
            )

        if ranges is not None and len(ranges):
            table = target if target is not None else self._target
            if table is None:
                table = declared
            predicates.extend(
                self._range_predicates(
                    ranges, table, declared, filter_type, diagnostics
                )
            )

        logger.debug(
            "Built %d predicate(s), dropped %d field(s)",
            len(predicates),
            len(diagnostics),
        )
        return Criteria(predicates, diagnostics)

    # -- regular filters -----------------------------------------------------

    def _regular_predicates(
        self,
        filters: Any,
        table: FieldTable,
        diagnostics: list[Diagnostic],
    ) -> list[AtomicPredicate]:
        out: list[AtomicPredicate] = []
        for descriptor in table.values():
            name = descriptor.name
            try:
                value = getattr(filters, name)
            except Exception as exc:
                logger.exception("Error accessing field: %s", name)
                diagnostics.append(
                    Diagnostic.from_error(name, FieldAccessError(name, repr(exc)))
                )
                continue

            if value is None:
                continue

            classification = classify(descriptor)
            if classification.is_excluded:
                logger.debug("Skipping identifier field: %s", name)
                continue

            if classification.is_filterable_identifier or not _is_text(value):
                out.append(Equals(name, value))
            elif value:
                out.append(Contains(name, value))
        return out

    # -- range filters -------------------------------------------------------

    def _range_predicates(
        self,
        ranges: RangeTable,
        table: FieldTable | None,
        declared: FieldTable | None,
        filter_type: type[Any] | None,
        diagnostics: list[Diagnostic],
    ) -> list[AtomicPredicate]:
        out: list[AtomicPredicate] = []
        owner = table.owner if table is not None else "<unknown>"
        for name, rng in ranges.items():
            descriptor = table.get(name) if table is not None else None
            if descriptor is None:
                exc = UnknownRangeFieldError(name, owner)
                logger.debug("%s", exc)
                diagnostics.append(Diagnostic.from_error(name, exc))
                continue

            # Either side may mark the field; the filter type carries the
            # filterable-identifier marker, the entity its primary key.
            sides = (descriptor, declared.get(name) if declared is not None else None)
            if any(classify(d).is_any_identifier for d in sides if d is not None):
                logger.debug("Skipping range filter for ID field: %s", name)
                diagnostics.append(
                    Diagnostic(name, "identifier fields are never range-filtered")
                )
                continue

            predicate = _range_predicate(name, _coerce_bounds(rng, filter_type, name))
            if predicate is not None:
                out.append(predicate)
        return out


def _coerce_bounds(rng: Range, filter_type: type[Any] | None, name: str) -> Range:
    model_fields = getattr(filter_type, "model_fields", None)
    if not model_fields or name not in model_fields:
        return rng
    return rng.coerce_to(model_fields[name].annotation)


def _range_predicate(name: str, rng: Range) -> AtomicPredicate | None:
    if rng.lower is not None and rng.upper is not None:
        return Between(name, rng.lower, rng.upper)
    if rng.lower is not None:
        return GreaterOrEqual(name, rng.lower)
    if rng.upper is not None:
        return LessOrEqual(name, rng.upper)
    return None


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and not isinstance(value, Enum)
