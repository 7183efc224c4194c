"""Typed scalar values.

A value is always one of three tagged variants, each a frozen dataclass
that knows its own ``AttributeType``. Code that formats, compares or coerces
values dispatches over all three variants explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class AttributeType(Enum):
    """Declared type of an attribute."""

    INTEGER = "Integer"
    TEXT = "Text"
    REAL = "Real"

    @classmethod
    def from_name(cls, name: str) -> AttributeType:
        """Look up a type by its schema-file name.

        Matching is case-insensitive. ``String`` is accepted as an alias of
        ``Text`` since older schema files use it.

        Raises:
            ValueError: If the name is not a known type.
        """
        normalized = name.strip().lower()
        if normalized == "string":
            return cls.TEXT
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Unknown attribute type: {name!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class IntegerValue:
    value: int

    type: ClassVar[AttributeType] = AttributeType.INTEGER

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class TextValue:
    value: str

    type: ClassVar[AttributeType] = AttributeType.TEXT

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RealValue:
    value: float

    type: ClassVar[AttributeType] = AttributeType.REAL

    def __str__(self) -> str:
        return repr(self.value)


Value = Union[IntegerValue, TextValue, RealValue]
"""A schema-typed scalar."""


def make_value(attribute_type: AttributeType, raw: int | float | str) -> Value:
    """Wrap an already-typed Python scalar in the variant for ``attribute_type``.

    Raises:
        TypeError: If ``raw`` does not have the Python type the variant holds.
    """
    if attribute_type is AttributeType.INTEGER:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"Integer attribute requires int, got {type(raw).__name__}")
        return IntegerValue(raw)
    if attribute_type is AttributeType.TEXT:
        if not isinstance(raw, str):
            raise TypeError(f"Text attribute requires str, got {type(raw).__name__}")
        return TextValue(raw)
    if attribute_type is AttributeType.REAL:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise TypeError(f"Real attribute requires float, got {type(raw).__name__}")
        return RealValue(float(raw))
    raise TypeError(f"Unhandled attribute type: {attribute_type!r}")
