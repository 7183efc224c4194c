"""Literal coercion and value text encoding.

Two entry points turn text into typed values:

- ``coerce_literal`` handles literals written in a statement. Every literal
  loses one layer of surrounding single quotes, so ``'20'`` is a valid
  Integer.
- ``parse_stored_value`` handles fields read back from a table data file,
  where text is stored bare.

``format_value`` is the inverse used when writing data files, and
``ensure_storable`` rejects text values that format cannot represent.
"""

from __future__ import annotations

import re
from typing import Sequence

from query_engine.domain.exceptions import InvalidLiteral
from query_engine.domain.value_objects import (
    AttributeType,
    IntegerValue,
    RealValue,
    TextValue,
    Value,
)

_INTEGER_RE = re.compile(r"[+-]?\d+")
_REAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

FIELD_SEPARATOR = ","
UNSTORABLE_CHARACTERS = (FIELD_SEPARATOR, "\n", "\r")


def strip_quotes(literal: str) -> str:
    """Remove one layer of surrounding single quotes, if present."""
    if len(literal) >= 2 and literal[0] == "'" and literal[-1] == "'":
        return literal[1:-1]
    return literal


def parse_integer(text: str) -> int:
    """Parse a base-10 signed integer.

    Raises:
        ValueError: If ``text`` is not an optional sign followed by digits.
    """
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"not a base-10 integer: {text!r}")
    return int(text)


def parse_real(text: str) -> float:
    """Parse a decimal number, optionally with an exponent.

    ``inf``, ``nan`` and other spellings ``float()`` would accept are
    rejected.

    Raises:
        ValueError: If ``text`` is not a decimal number.
    """
    if not _REAL_RE.fullmatch(text):
        raise ValueError(f"not a decimal number: {text!r}")
    return float(text)


def _to_value(attribute_type: AttributeType, text: str, literal: str) -> Value:
    try:
        if attribute_type is AttributeType.INTEGER:
            return IntegerValue(parse_integer(text))
        if attribute_type is AttributeType.REAL:
            return RealValue(parse_real(text))
    except ValueError:
        raise InvalidLiteral(literal, attribute_type.value) from None
    if attribute_type is AttributeType.TEXT:
        return TextValue(text)
    raise TypeError(f"Unhandled attribute type: {attribute_type!r}")


def coerce_literal(attribute_type: AttributeType, literal: str) -> Value:
    """Coerce a statement literal to ``attribute_type``.

    Raises:
        InvalidLiteral: If the literal is not valid for the type.
    """
    if attribute_type is AttributeType.TEXT:
        return TextValue(strip_quotes(literal))
    return _to_value(attribute_type, strip_quotes(literal.strip()).strip(), literal)


def parse_stored_value(attribute_type: AttributeType, field: str) -> Value:
    """Decode one trimmed field of a data file line.

    Raises:
        InvalidLiteral: If the field is not valid for the type.
    """
    return _to_value(attribute_type, field, field)


def format_value(value: Value) -> str:
    """Encode a value for a data file field."""
    if isinstance(value, IntegerValue):
        return str(value.value)
    if isinstance(value, TextValue):
        return value.value
    if isinstance(value, RealValue):
        return repr(value.value)
    raise TypeError(f"Unhandled value variant: {type(value).__name__}")


def ensure_storable(values: Sequence[Value], literals: Sequence[str]) -> None:
    """Check that a row of values can be written to a data file.

    Fields are comma-separated with no escaping, one row per line, and
    blank lines are skipped on read.

    Raises:
        InvalidLiteral: If a text value holds a separator or line break, or
            is the blank sole value of a row.
    """
    for value, literal in zip(values, literals):
        if isinstance(value, TextValue) and any(c in value.value for c in UNSTORABLE_CHARACTERS):
            raise InvalidLiteral(
                literal, value.type.value, "commas and line breaks cannot be stored"
            )
    if len(values) == 1 and isinstance(values[0], TextValue) and not values[0].value.strip():
        raise InvalidLiteral(
            literals[0], values[0].type.value, "a blank single-value row cannot be stored"
        )
