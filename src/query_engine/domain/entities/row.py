"""Row entity: one schema-conformant tuple of typed values.

Rows are immutable. Projection and copying always produce a new Row, so a
row held by a result table never aliases a row held by a stored table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence

from query_engine.domain.entities.schema import Schema
from query_engine.domain.value_objects import Value


@dataclass(frozen=True, slots=True)
class Row:
    """An ordered tuple of values.

    Build rows through ``Row.build`` so arity and per-ordinal types are
    checked against a schema.
    """

    values: tuple[Value, ...]

    @classmethod
    def build(cls, schema: Schema, values: Sequence[Value]) -> Row:
        """Create a row conforming to ``schema``.

        Raises:
            ValueError: If the number of values differs from the schema arity.
            TypeError: If a value's type differs from its attribute's type.
        """
        values = tuple(values)
        if len(values) != schema.arity:
            raise ValueError(f"Row has {len(values)} values, schema {schema} expects {schema.arity}")
        for attribute, value in zip(schema.attributes, values):
            if value.type is not attribute.type:
                raise TypeError(
                    f"Attribute {attribute.name!r} is {attribute.type}, got {value.type} value"
                )
        return cls(values)

    def project(self, ordinals: Sequence[int]) -> Row:
        """New row holding the values at ``ordinals``, in that order."""
        return Row(tuple(self.values[ordinal] for ordinal in ordinals))

    def as_python(self) -> tuple[Any, ...]:
        """Plain Python scalars, e.g. ``("Alice", 20)``."""
        return tuple(value.value for value in self.values)

    def __getitem__(self, ordinal: int) -> Value:
        return self.values[ordinal]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def __repr__(self) -> str:
        return f"Row({', '.join(repr(value.value) for value in self.values)})"
