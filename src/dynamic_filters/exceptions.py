"""
Filter engine exception hierarchy.

All exceptions inherit from ``FilterError`` and provide ``to_dict()``
for API-friendly error responses.

Only ``ConfigurationError``, ``FieldNotFoundError`` and
``BackendExecutionError`` ever escape the engine.  ``FieldAccessError``
and ``UnknownRangeFieldError`` are recorded as diagnostics by the
criteria builder and the offending field is dropped.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class FilterError(Exception):
    """Base exception for all filter engine errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ConfigurationError(FilterError):
    """The engine was used without a configured data-access handle."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONFIGURATION_ERROR",
            "message": str(self),
        }


class FieldAccessError(FilterError):
    """A filter field could not be read while building criteria."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Cannot read filter field '{field}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_ACCESS_ERROR",
            "field": self.field,
            "reason": self.reason,
        }


class UnknownRangeFieldError(FilterError):
    """A range-table entry names a field the target type does not declare."""

    def __init__(self, field: str, target: str) -> None:
        self.field = field
        self.target = target
        super().__init__(f"Range filter on unknown field '{field}' of '{target}'")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_RANGE_FIELD",
            "field": self.field,
            "target": self.target,
        }


class FieldNotFoundError(FilterError):
    """
    A predicate names an attribute the backend model does not map.

    The message lists the closest mapped names first, then every mapped
    name (truncated past ``MAX_LISTED``)::

        Unknown field 'nmae' on 'UserRecord' (did you mean: name?).
        Mapped fields: active, count, created_date, id, name
    """

    MAX_LISTED = 15

    def __init__(
        self,
        field: str,
        model: str,
        mapped: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.field = field
        self.model = model
        self.mapped = sorted(mapped)
        self.suggestions = get_close_matches(field, self.mapped, n=3, cutoff=cutoff)

        hint = ""
        if self.suggestions:
            hint = f" (did you mean: {', '.join(self.suggestions)}?)"
        listed = self.mapped[: self.MAX_LISTED]
        more = ", ..." if len(self.mapped) > self.MAX_LISTED else ""
        super().__init__(
            f"Unknown field '{field}' on '{model}'{hint}.\n"
            f"Mapped fields: {', '.join(listed)}{more}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.field,
            "model": self.model,
            "suggestions": self.suggestions,
            "mapped_fields": self.mapped,
        }


class BackendExecutionError(FilterError):
    """
    The fetch or count query failed against the underlying store.

    Both halves of a page request are treated as failed together; the
    original driver exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} query failed: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "BACKEND_EXECUTION_ERROR",
            "operation": self.operation,
            "message": self.message,
        }
