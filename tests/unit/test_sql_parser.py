"""Unit tests for the statement parser."""

from __future__ import annotations

import pytest

from query_engine.adapters.inbound.sql_parser import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    SQLParser,
    StatementType,
)
from query_engine.domain.exceptions import MalformedCondition, ParseError
from query_engine.domain.value_objects import ComparisonOp, Condition


@pytest.fixture
def parser() -> SQLParser:
    return SQLParser()


@pytest.mark.unit
class TestSelect:
    """Tests for SELECT parsing."""

    def test_select_with_condition(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT name, age FROM Students WHERE age >= 18")

        assert isinstance(stmt, SelectStatement)
        assert stmt.statement_type is StatementType.SELECT
        assert stmt.attributes == ("name", "age")
        assert stmt.table_name == "Students"
        assert stmt.condition == Condition("age", ComparisonOp.GE, "18")
        assert not stmt.select_all

    def test_select_without_condition(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT sid FROM Students")

        assert stmt.condition is None

    def test_select_star(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT * FROM Students")

        assert isinstance(stmt, SelectStatement)
        assert stmt.select_all
        assert stmt.attributes == ()

    def test_keywords_any_case(self, parser: SQLParser) -> None:
        stmt = parser.parse("select name from Students where age = 20")

        assert isinstance(stmt, SelectStatement)
        assert stmt.condition == Condition("age", ComparisonOp.EQ, "20")

    def test_trailing_semicolon(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT name FROM Students;")

        assert isinstance(stmt, SelectStatement)

    def test_quoted_literal_keeps_quotes(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT age FROM Students WHERE name = 'Alice'")

        assert stmt.condition == Condition("name", ComparisonOp.EQ, "'Alice'")

    def test_operator_characters_in_literal(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT age FROM Students WHERE name != 'a<=b=c'")

        assert stmt.condition == Condition("name", ComparisonOp.NE, "'a<=b=c'")

    def test_bare_word_literal(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT age FROM Students WHERE name = Alice")

        assert stmt.condition == Condition("name", ComparisonOp.EQ, "Alice")

    def test_negative_literal(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT age FROM Students WHERE age > -1")

        assert stmt.condition == Condition("age", ComparisonOp.GT, "-1")

    def test_str(self, parser: SQLParser) -> None:
        stmt = parser.parse("select name,age from Students where age<20")

        assert str(stmt) == "SELECT name, age FROM Students WHERE age < 20"


@pytest.mark.unit
class TestInsert:
    """Tests for INSERT parsing."""

    def test_insert(self, parser: SQLParser) -> None:
        stmt = parser.parse("INSERT INTO Students (sid,name,age) VALUES ('s1','Alice',20)")

        assert isinstance(stmt, InsertStatement)
        assert stmt.statement_type is StatementType.INSERT
        assert stmt.table_name == "Students"
        assert stmt.attributes == ("sid", "name", "age")
        assert stmt.literals == ("'s1'", "'Alice'", "20")

    def test_insert_signed_and_decimal_literals(self, parser: SQLParser) -> None:
        stmt = parser.parse("INSERT INTO T (a, b) VALUES (-4, 2.5)")

        assert stmt.literals == ("-4", "2.5")

    def test_insert_keeps_mismatched_lengths(self, parser: SQLParser) -> None:
        stmt = parser.parse("INSERT INTO Students (sid, name) VALUES ('s2', 'Bob', 3)")

        assert len(stmt.attributes) == 2
        assert len(stmt.literals) == 3

    def test_insert_bare_word_value_rejected(self, parser: SQLParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("INSERT INTO Students (sid) VALUES (s1)")

    def test_insert_missing_values(self, parser: SQLParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("INSERT INTO Students (sid, name, age)")

    def test_insert_without_column_list(self, parser: SQLParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("INSERT INTO Students VALUES ('s1', 'Alice', 20)")


@pytest.mark.unit
class TestDelete:
    """Tests for DELETE parsing."""

    def test_delete_all(self, parser: SQLParser) -> None:
        stmt = parser.parse("DELETE FROM Students")

        assert isinstance(stmt, DeleteStatement)
        assert stmt.statement_type is StatementType.DELETE
        assert stmt.condition is None

    def test_delete_with_condition(self, parser: SQLParser) -> None:
        stmt = parser.parse("DELETE FROM Students WHERE sid = 's2'")

        assert stmt.condition == Condition("sid", ComparisonOp.EQ, "'s2'")
        assert str(stmt) == "DELETE FROM Students WHERE sid = 's2'"


@pytest.mark.unit
class TestParseErrors:
    """Tests for rejected statement text."""

    @pytest.mark.parametrize(
        "sql",
        [
            "",
            "   ",
            "UPDATE Students SET age = 1",
            "SELECT FROM Students",
            "SELECT name Students",
            "SELECT name, FROM Students",
            "SELECT name FROM",
            "SELECT name FROM Students extra",
            "DELETE Students",
            "SELECT name FROM Students; SELECT age FROM Students",
        ],
    )
    def test_invalid_statements(self, parser: SQLParser, sql: str) -> None:
        with pytest.raises(ParseError):
            parser.parse(sql)

    @pytest.mark.parametrize(
        "where",
        [
            "age",
            "age = 1 = 2",
            "= 5",
            "age =",
            "age 18",
            "age >= 18 19",
            "age = (1)",
            "",
        ],
    )
    def test_malformed_conditions(self, parser: SQLParser, where: str) -> None:
        with pytest.raises(MalformedCondition) as exc_info:
            parser.parse(f"SELECT name FROM Students WHERE {where}")

        assert exc_info.value.kind == "malformed_condition"

    def test_malformed_condition_is_a_parse_error(self) -> None:
        assert issubclass(MalformedCondition, ParseError)

    def test_error_carries_clause(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedCondition) as exc_info:
            parser.parse("SELECT name FROM Students WHERE age = 1 = 2")

        assert exc_info.value.clause == "age = 1 = 2"
