"""Unit tests for typed values and conditions."""

from __future__ import annotations

import pytest

from query_engine.domain.value_objects import (
    AttributeType,
    ComparisonOp,
    Condition,
    IntegerValue,
    RealValue,
    TextValue,
    make_value,
)


@pytest.mark.unit
class TestAttributeType:
    """Tests for AttributeType."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Integer", AttributeType.INTEGER),
            ("integer", AttributeType.INTEGER),
            ("Text", AttributeType.TEXT),
            ("TEXT", AttributeType.TEXT),
            ("String", AttributeType.TEXT),
            ("Real", AttributeType.REAL),
            (" real ", AttributeType.REAL),
        ],
    )
    def test_from_name(self, name: str, expected: AttributeType) -> None:
        assert AttributeType.from_name(name) is expected

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown attribute type"):
            AttributeType.from_name("Boolean")

    def test_str(self) -> None:
        assert str(AttributeType.INTEGER) == "Integer"


@pytest.mark.unit
class TestValues:
    """Tests for the value variants."""

    def test_each_variant_knows_its_type(self) -> None:
        assert IntegerValue(1).type is AttributeType.INTEGER
        assert TextValue("a").type is AttributeType.TEXT
        assert RealValue(1.5).type is AttributeType.REAL

    def test_values_are_immutable(self) -> None:
        value = IntegerValue(1)
        with pytest.raises(AttributeError):
            value.value = 2  # type: ignore[misc]

    def test_equality_is_per_variant(self) -> None:
        assert IntegerValue(1) == IntegerValue(1)
        assert IntegerValue(1) != RealValue(1.0)
        assert TextValue("1") != IntegerValue(1)

    def test_str(self) -> None:
        assert str(IntegerValue(-3)) == "-3"
        assert str(TextValue("Alice")) == "Alice"
        assert str(RealValue(0.1)) == "0.1"

    def test_make_value(self) -> None:
        assert make_value(AttributeType.INTEGER, 5) == IntegerValue(5)
        assert make_value(AttributeType.TEXT, "x") == TextValue("x")
        assert make_value(AttributeType.REAL, 2) == RealValue(2.0)

    @pytest.mark.parametrize(
        "attribute_type, raw",
        [
            (AttributeType.INTEGER, "5"),
            (AttributeType.INTEGER, 5.0),
            (AttributeType.INTEGER, True),
            (AttributeType.TEXT, 5),
            (AttributeType.REAL, "1.5"),
        ],
    )
    def test_make_value_type_mismatch(self, attribute_type: AttributeType, raw: object) -> None:
        with pytest.raises(TypeError):
            make_value(attribute_type, raw)  # type: ignore[arg-type]


@pytest.mark.unit
class TestComparisonOp:
    """Tests for ComparisonOp and Condition."""

    @pytest.mark.parametrize("symbol", ["=", "!=", "<", ">", "<=", ">="])
    def test_from_symbol_round_trips(self, symbol: str) -> None:
        assert ComparisonOp.from_symbol(symbol).value == symbol

    def test_angle_brackets_mean_not_equal(self) -> None:
        assert ComparisonOp.from_symbol("<>") is ComparisonOp.NE

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValueError):
            ComparisonOp.from_symbol("=>")

    def test_is_equality(self) -> None:
        assert ComparisonOp.EQ.is_equality
        assert ComparisonOp.NE.is_equality
        assert not ComparisonOp.LT.is_equality
        assert not ComparisonOp.GE.is_equality

    def test_condition_str(self) -> None:
        condition = Condition("name", ComparisonOp.EQ, "'Alice'")
        assert str(condition) == "name = 'Alice'"
