"""
Range table: caller-supplied lower/upper bounds keyed by field name.

Accepts both the wire shape ``{"ranges": {"count": {"from": 1, "to": 5}}}``
and a bare mapping ``{"count": {"lower": 1, "upper": 5}}``.  Bounds are
never reordered; an inverted range is passed through to the backend.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    model_validator,
)


class Range(BaseModel):
    """Optional ``lower`` / ``upper`` bounds (``from`` / ``to`` on the wire)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    lower: Any = Field(
        default=None,
        validation_alias=AliasChoices("lower", "from", "from_"),
        serialization_alias="from",
    )
    upper: Any = Field(
        default=None,
        validation_alias=AliasChoices("upper", "to"),
        serialization_alias="to",
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_pairs(cls, data: Any) -> Any:
        if isinstance(data, (tuple, list)):
            if len(data) != 2:
                raise ValueError("a range pair needs exactly two bounds")
            return {"lower": data[0], "upper": data[1]}
        return data

    @property
    def is_empty(self) -> bool:
        """Both bounds unset; the range is treated as absent."""
        return self.lower is None and self.upper is None

    def coerce_to(self, annotation: Any) -> Range:
        """
        Validate both bounds against *annotation*.

        Raises:
            pydantic.ValidationError: A bound does not fit the annotation.
        """
        if self.is_empty:
            return self
        adapter: TypeAdapter[Any] = TypeAdapter(annotation)
        return Range(
            lower=None if self.lower is None else adapter.validate_python(self.lower),
            upper=None if self.upper is None else adapter.validate_python(self.upper),
        )


class RangeTable(BaseModel):
    """Mapping of field name -> :class:`Range`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ranges: dict[str, Range] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_mapping(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and "ranges" not in data:
            return {"ranges": dict(data)}
        return data

    @classmethod
    def of(cls, **ranges: Any) -> RangeTable:
        """``RangeTable.of(count=(1, 5), created=(None, cutoff))``."""
        return cls.model_validate({"ranges": ranges})

    def items(self) -> Iterator[tuple[str, Range]]:
        """Entries in insertion order."""
        return iter(self.ranges.items())

    def __len__(self) -> int:
        return len(self.ranges)

    def get(self, name: str) -> Range | None:
        return self.ranges.get(name)

    def coerce(self, model: type[BaseModel]) -> RangeTable:
        """
        Return a copy whose bounds are validated against *model*'s field
        annotations (``"2024-01-01"`` -> ``datetime``).  Entries naming
        fields *model* does not declare are kept untouched.
        """
        fields = model.model_fields
        return RangeTable(
            ranges={
                name: (
                    rng if name not in fields else rng.coerce_to(fields[name].annotation)
                )
                for name, rng in self.ranges.items()
            }
        )

