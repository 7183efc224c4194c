"""Value objects for the query engine domain.

Value objects are immutable types with no identity.

Exports:
    Values:
        - AttributeType: Declared attribute type (Integer, Text, Real)
        - IntegerValue, TextValue, RealValue: Tagged scalar variants
        - Value: Union of the three variants
        - make_value: Wrap a Python scalar in the right variant

    Conditions:
        - ComparisonOp: =, !=, <, >, <=, >=
        - Condition: attribute/operator/literal predicate
"""

from query_engine.domain.value_objects.condition import ComparisonOp, Condition
from query_engine.domain.value_objects.values import (
    AttributeType,
    IntegerValue,
    RealValue,
    TextValue,
    Value,
    make_value,
)

__all__ = [
    # Values
    "AttributeType",
    "IntegerValue",
    "TextValue",
    "RealValue",
    "Value",
    "make_value",
    # Conditions
    "ComparisonOp",
    "Condition",
]
