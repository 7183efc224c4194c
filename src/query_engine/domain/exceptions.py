"""Statement error taxonomy.

Every failure a statement can hit during parse, resolve or validate is a
``QueryError`` subclass. Each class carries a stable ``kind`` string plus the
fields that identify its cause, so callers branch on type (or ``kind``)
rather than on message text.

All of these are recoverable at statement granularity: nothing has been
mutated when one is raised.
"""

from __future__ import annotations

from typing import ClassVar


class QueryError(Exception):
    """Base class for all statement errors."""

    kind: ClassVar[str] = "query_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Serializable view used by the inbound adapters."""
        return {"kind": self.kind, "message": self.message}


class ParseError(QueryError):
    """Statement text could not be parsed."""

    kind: ClassVar[str] = "parse_error"

    def __init__(self, message: str, clause: str = "") -> None:
        if clause:
            message = f"{message}: {clause!r}"
        super().__init__(message)
        self.clause = clause


class MalformedCondition(ParseError):
    """WHERE clause is not ``<attribute> <operator> <literal>``."""

    kind: ClassVar[str] = "malformed_condition"


class TableNotFound(QueryError):
    kind: ClassVar[str] = "table_not_found"

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table not found: {table_name}")
        self.table_name = table_name


class UnknownAttribute(QueryError):
    kind: ClassVar[str] = "unknown_attribute"

    def __init__(self, attribute: str) -> None:
        super().__init__(f"Unknown attribute: {attribute}")
        self.attribute = attribute


class DuplicateAttribute(QueryError):
    """An attribute is named more than once in a select list."""

    kind: ClassVar[str] = "duplicate_attribute"

    def __init__(self, attribute: str) -> None:
        super().__init__(f"Duplicate attribute: {attribute}")
        self.attribute = attribute


class ArityMismatch(QueryError):
    """Attribute and value lists disagree, or don't cover the schema in order."""

    kind: ClassVar[str] = "arity_mismatch"

    def __init__(self, message: str, expected: int, actual: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class InvalidLiteral(QueryError):
    """A literal could not be coerced to the attribute's declared type."""

    kind: ClassVar[str] = "invalid_literal"

    def __init__(self, literal: str, attribute_type: str, reason: str = "") -> None:
        message = f"Invalid {attribute_type} literal: {literal!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.literal = literal
        self.attribute_type = attribute_type


class UnsupportedOperator(QueryError):
    """Operator is not permitted for the attribute's type."""

    kind: ClassVar[str] = "unsupported_operator"

    def __init__(self, operator: str, attribute_type: str) -> None:
        super().__init__(f"Operator {operator!r} is not supported for {attribute_type} attributes")
        self.operator = operator
        self.attribute_type = attribute_type
