"""Single-predicate WHERE conditions."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class ComparisonOp(Enum):
    """Comparison operators allowed in a condition."""

    EQ = "="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="

    @classmethod
    def from_symbol(cls, symbol: str) -> ComparisonOp:
        """Map operator text to a member. ``<>`` is read as ``!=``."""
        if symbol == "<>":
            return cls.NE
        return cls(symbol)

    @property
    def is_equality(self) -> bool:
        """True for ``=`` and ``!=``, the only operators text supports."""
        return self in (ComparisonOp.EQ, ComparisonOp.NE)

    def apply(self, left: Any, right: Any) -> bool:
        return _OPERATOR_FUNCS[self](left, right)

    def __str__(self) -> str:
        return self.value


_OPERATOR_FUNCS: dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQ: operator.eq,
    ComparisonOp.NE: operator.ne,
    ComparisonOp.LT: operator.lt,
    ComparisonOp.GT: operator.gt,
    ComparisonOp.LE: operator.le,
    ComparisonOp.GE: operator.ge,
}


@dataclass(frozen=True)
class Condition:
    """``attribute op literal``.

    ``literal`` is kept as written in the statement (a quoted text literal
    keeps its quotes); it is coerced against the schema only at evaluation
    time.
    """

    attribute: str
    op: ComparisonOp
    literal: str

    def __str__(self) -> str:
        return f"{self.attribute} {self.op.value} {self.literal}"
