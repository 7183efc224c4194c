"""Unit tests for literal coercion and value encoding."""

from __future__ import annotations

import pytest

from query_engine.domain.exceptions import InvalidLiteral
from query_engine.domain.services import (
    coerce_literal,
    ensure_storable,
    format_value,
    parse_stored_value,
    strip_quotes,
)
from query_engine.domain.value_objects import AttributeType, IntegerValue, RealValue, TextValue


@pytest.mark.unit
class TestCoerceLiteral:
    """Tests for coerce_literal."""

    @pytest.mark.parametrize(
        "literal, expected",
        [("42", 42), ("-7", -7), ("+3", 3), (" 12 ", 12), ("0", 0), ("12345678901234567890", 12345678901234567890)],
    )
    def test_integer(self, literal: str, expected: int) -> None:
        assert coerce_literal(AttributeType.INTEGER, literal) == IntegerValue(expected)

    @pytest.mark.parametrize("literal", ["4.0", "abc", "", "1 2", "''", "'20", "'4.0'", "0x10"])
    def test_integer_invalid(self, literal: str) -> None:
        with pytest.raises(InvalidLiteral) as exc_info:
            coerce_literal(AttributeType.INTEGER, literal)

        assert exc_info.value.literal == literal
        assert exc_info.value.attribute_type == "Integer"

    @pytest.mark.parametrize(
        "literal, expected",
        [("3.5", 3.5), ("-0.25", -0.25), ("7", 7.0), ("1e3", 1000.0), (".5", 0.5)],
    )
    def test_real(self, literal: str, expected: float) -> None:
        assert coerce_literal(AttributeType.REAL, literal) == RealValue(expected)

    @pytest.mark.parametrize(
        "literal, expected",
        [("'20'", 20), ("' -3 '", -3), (" '7' ", 7)],
    )
    def test_quoted_integer(self, literal: str, expected: int) -> None:
        assert coerce_literal(AttributeType.INTEGER, literal) == IntegerValue(expected)

    def test_quoted_real(self) -> None:
        assert coerce_literal(AttributeType.REAL, "'1.5'") == RealValue(1.5)

    @pytest.mark.parametrize("literal", ["inf", "nan", "1.2.3", "'inf'"])
    def test_real_invalid(self, literal: str) -> None:
        with pytest.raises(InvalidLiteral):
            coerce_literal(AttributeType.REAL, literal)

    @pytest.mark.parametrize(
        "literal, expected",
        [("'Alice'", "Alice"), ("Alice", "Alice"), ("''", ""), ("'", "'"), ("20", "20")],
    )
    def test_text_strips_one_layer_of_quotes(self, literal: str, expected: str) -> None:
        assert coerce_literal(AttributeType.TEXT, literal) == TextValue(expected)


@pytest.mark.unit
class TestStoredValues:
    """Tests for parse_stored_value, format_value and strip_quotes."""

    def test_stored_text_keeps_quotes(self) -> None:
        assert parse_stored_value(AttributeType.TEXT, "'quoted'") == TextValue("'quoted'")

    def test_stored_integer(self) -> None:
        assert parse_stored_value(AttributeType.INTEGER, "-5") == IntegerValue(-5)

    def test_stored_invalid(self) -> None:
        with pytest.raises(InvalidLiteral):
            parse_stored_value(AttributeType.INTEGER, "twenty")

    @pytest.mark.parametrize(
        "value, text",
        [
            (IntegerValue(-5), "-5"),
            (TextValue("Alice"), "Alice"),
            (RealValue(0.1), "0.1"),
            (RealValue(5.0), "5.0"),
        ],
    )
    def test_format_value(self, value: object, text: str) -> None:
        assert format_value(value) == text  # type: ignore[arg-type]

    def test_strip_quotes_only_when_both_ends_quoted(self) -> None:
        assert strip_quotes("'a'") == "a"
        assert strip_quotes("'a") == "'a"
        assert strip_quotes("''a''") == "'a'"


@pytest.mark.unit
class TestEnsureStorable:
    """Tests for ensure_storable."""

    def test_plain_row(self) -> None:
        ensure_storable(
            [TextValue("s4"), TextValue(""), IntegerValue(19)],
            ["'s4'", "''", "19"],
        )

    @pytest.mark.parametrize("text", ["Smith, J", "two\nlines", "carriage\rreturn", ","])
    def test_separator_or_line_break(self, text: str) -> None:
        literal = f"'{text}'"

        with pytest.raises(InvalidLiteral) as exc_info:
            ensure_storable([TextValue("s4"), TextValue(text)], ["'s4'", literal])

        assert exc_info.value.literal == literal
        assert exc_info.value.attribute_type == "Text"
        assert "commas and line breaks" in exc_info.value.message

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_single_value(self, text: str) -> None:
        with pytest.raises(InvalidLiteral, match="blank single-value row"):
            ensure_storable([TextValue(text)], [f"'{text}'"])

    def test_blank_text_beside_other_values(self) -> None:
        ensure_storable([TextValue(""), TextValue("")], ["''", "''"])

    def test_single_integer(self) -> None:
        ensure_storable([IntegerValue(0)], ["0"])
