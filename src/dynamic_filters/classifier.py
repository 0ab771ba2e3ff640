"""
Field classification.

Pure functions over a :class:`~dynamic_filters.fields.FieldDescriptor`.
The same policy drives criteria building and parameter documentation,
so the two can never disagree about which fields are filterable.
"""

from __future__ import annotations

from dataclasses import dataclass

from .fields import FieldDescriptor, FieldType

ID_FIELD_NAME = "id"
ID_SUFFIX = "Id"

_RANGEABLE_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.NUMBER, FieldType.TIMESTAMP}
)


@dataclass(frozen=True)
class FieldClassification:
    """
    Derived classification of a single field.

    Attributes:
        is_identifier: Primary key, named ``id``, or named ``*Id`` (or
            ``*_id``), and not carrying the filterable-identifier marker.
        is_filterable_identifier: Carries the filterable-identifier marker.
        is_rangeable: Numeric or temporal field that is neither of the
            above.
    """

    is_identifier: bool
    is_filterable_identifier: bool
    is_rangeable: bool

    @property
    def is_excluded(self) -> bool:
        """Identifier that contributes nothing to the criteria."""
        return self.is_identifier

    @property
    def is_any_identifier(self) -> bool:
        """Identifier of either kind; never range-filtered."""
        return self.is_identifier or self.is_filterable_identifier


def has_identifier_name(name: str) -> bool:
    """``id`` exactly, or the ``Id`` / ``_id`` identifier suffix."""
    return (
        name == ID_FIELD_NAME
        or name.endswith(ID_SUFFIX)
        or name.endswith("_" + ID_FIELD_NAME)
    )


def is_any_identifier(descriptor: FieldDescriptor) -> bool:
    """Identifier by marker or by naming convention, ignoring opt-ins."""
    return (
        descriptor.is_primary_key
        or descriptor.is_filterable_id
        or has_identifier_name(descriptor.name)
    )


def classify(descriptor: FieldDescriptor) -> FieldClassification:
    """Classify *descriptor*; safe to call concurrently."""
    any_identifier = is_any_identifier(descriptor)
    filterable = descriptor.is_filterable_id
    return FieldClassification(
        is_identifier=any_identifier and not filterable,
        is_filterable_identifier=filterable,
        is_rangeable=(
            not any_identifier and descriptor.field_type in _RANGEABLE_TYPES
        ),
    )
