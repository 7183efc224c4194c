"""Condition evaluation against rows.

Evaluating ``attribute op literal`` on a row takes three steps:

1. Resolve the attribute to an ordinal in the schema.
2. Coerce the literal to the attribute's declared type.
3. Apply the operator to the row's value and the coerced literal.

Steps 1 and 2 depend only on the schema, so they run once in ``bind`` and
the resulting ``BoundCondition`` is applied to every row of a scan.

Type rules:
    - Integer: all six operators, native integer ordering.
    - Text: ``=`` and ``!=`` only (exact equality).
    - Real: conditions on Real attributes are not supported.

Evaluation is pure and never mutates the row or the schema.
"""

from __future__ import annotations

from dataclasses import dataclass

from query_engine.domain.entities import Row, Schema
from query_engine.domain.exceptions import UnsupportedOperator
from query_engine.domain.services.coercion import coerce_literal
from query_engine.domain.value_objects import (
    AttributeType,
    Condition,
    IntegerValue,
    TextValue,
    Value,
)


@dataclass(frozen=True)
class BoundCondition:
    """A condition resolved and coerced against one schema."""

    condition: Condition
    ordinal: int
    operand: Value

    def matches(self, row: Row) -> bool:
        """Apply the operator to the row's value and the bound operand."""
        left = row[self.ordinal]
        right = self.operand
        if isinstance(left, IntegerValue) and isinstance(right, IntegerValue):
            return self.condition.op.apply(left.value, right.value)
        if isinstance(left, TextValue) and isinstance(right, TextValue):
            return self.condition.op.apply(left.value, right.value)
        raise TypeError(
            f"Cannot compare {type(left).__name__} with {type(right).__name__}"
        )


class ConditionEvaluator:
    """Evaluates single-predicate conditions."""

    def bind(self, condition: Condition, schema: Schema) -> BoundCondition:
        """Resolve and coerce ``condition`` against ``schema``.

        Raises:
            UnknownAttribute: If the attribute is not in the schema.
            InvalidLiteral: If the literal does not parse as an integer for
                an Integer attribute.
            UnsupportedOperator: If the attribute is Real, or it is Text and
                the operator is not ``=``/``!=``.
        """
        ordinal = schema.index_of(condition.attribute)
        attribute_type = schema.attribute(ordinal).type

        if attribute_type is AttributeType.REAL:
            raise UnsupportedOperator(condition.op.value, attribute_type.value)

        operand = coerce_literal(attribute_type, condition.literal)

        if attribute_type is AttributeType.TEXT and not condition.op.is_equality:
            raise UnsupportedOperator(condition.op.value, attribute_type.value)

        return BoundCondition(condition=condition, ordinal=ordinal, operand=operand)

    def evaluate(self, condition: Condition, row: Row, schema: Schema) -> bool:
        """Evaluate ``condition`` on one row."""
        return self.bind(condition, schema).matches(row)


def evaluate(condition: Condition, row: Row, schema: Schema) -> bool:
    """Module-level shorthand for ``ConditionEvaluator().evaluate``."""
    return ConditionEvaluator().evaluate(condition, row, schema)
