"""Domain services for the query engine.

Exports:
    Coercion:
        - coerce_literal: Statement literal -> typed value
        - parse_stored_value: Data-file field -> typed value
        - format_value: Typed value -> data-file field
        - strip_quotes: Remove one layer of single quotes
        - ensure_storable: Reject rows the data file format cannot hold

    Condition evaluation:
        - ConditionEvaluator: Binds and evaluates conditions
        - BoundCondition: Condition resolved against one schema
        - evaluate: Evaluate a condition on a single row
"""

from query_engine.domain.services.coercion import (
    coerce_literal,
    ensure_storable,
    format_value,
    parse_stored_value,
    strip_quotes,
)
from query_engine.domain.services.condition_evaluator import (
    BoundCondition,
    ConditionEvaluator,
    evaluate,
)

__all__ = [
    "coerce_literal",
    "parse_stored_value",
    "format_value",
    "strip_quotes",
    "ensure_storable",
    "ConditionEvaluator",
    "BoundCondition",
    "evaluate",
]
