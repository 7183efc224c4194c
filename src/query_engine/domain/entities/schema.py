"""Schema entity: the ordered, typed attribute list of one table.

An attribute is identified by its zero-based ordinal position. Schemas are
immutable once built; projecting a schema produces a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from query_engine.domain.exceptions import UnknownAttribute
from query_engine.domain.value_objects import AttributeType


@dataclass(frozen=True, slots=True)
class Attribute:
    """A named, typed column."""

    name: str
    type: AttributeType

    def __str__(self) -> str:
        return f"{self.name}:{self.type.value}"


@dataclass(frozen=True)
class Schema:
    """Ordered sequence of attributes.

    Attribute names must be unique. Lookup by name is case-sensitive.

    Example:
        >>> schema = Schema.of(("sid", AttributeType.TEXT), ("age", AttributeType.INTEGER))
        >>> schema.index_of("age")
        1
        >>> str(schema)
        '(sid:Text, age:Integer)'
    """

    attributes: tuple[Attribute, ...]
    _positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        attributes = tuple(self.attributes)
        positions: dict[str, int] = {}
        for ordinal, attribute in enumerate(attributes):
            if attribute.name in positions:
                raise ValueError(f"Duplicate attribute name: {attribute.name!r}")
            positions[attribute.name] = ordinal
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "_positions", positions)

    @classmethod
    def of(cls, *pairs: tuple[str, AttributeType]) -> Schema:
        """Build a schema from ``(name, type)`` pairs."""
        return cls(tuple(Attribute(name, attribute_type) for name, attribute_type in pairs))

    @property
    def arity(self) -> int:
        return len(self.attributes)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes)

    @property
    def types(self) -> tuple[AttributeType, ...]:
        return tuple(attribute.type for attribute in self.attributes)

    def attribute(self, ordinal: int) -> Attribute:
        return self.attributes[ordinal]

    def has(self, name: str) -> bool:
        return name in self._positions

    def index_of(self, name: str) -> int:
        """Return the ordinal of ``name``.

        Raises:
            UnknownAttribute: If no attribute has that exact name.
        """
        try:
            return self._positions[name]
        except KeyError:
            raise UnknownAttribute(name) from None

    def project(self, names: Iterable[str]) -> Schema:
        """Build a new schema holding ``names`` in the given order.

        Types are copied from this schema.

        Raises:
            UnknownAttribute: For the first name not in this schema.
        """
        return Schema(tuple(self.attributes[self.index_of(name)] for name in names))

    def __len__(self) -> int:
        return len(self.attributes)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __str__(self) -> str:
        return "(" + ", ".join(str(attribute) for attribute in self.attributes) + ")"
