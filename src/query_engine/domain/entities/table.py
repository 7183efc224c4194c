"""Table entity: a named, schema-bound, ordered collection of rows.

A table exclusively owns its row list. Readers get snapshots; writers go
through ``append``/``replace_rows``/``truncate``, all of which check
schema conformance. Insertion order is preserved and observable but carries
no meaning (no key, no uniqueness).
"""

from __future__ import annotations

import threading
from typing import Iterable, Iterator

from query_engine.domain.entities.row import Row
from query_engine.domain.entities.schema import Schema


class Table:
    """Ordered, mutable row sequence bound to one schema.

    Result tables produced by SELECT are unnamed (``name is None``) and are
    never registered in a catalog.

    Thread Safety:
        The table itself does no locking. ``lock`` is a re-entrant lock that
        callers hold for the full duration of a statement.
    """

    def __init__(
        self,
        name: str | None,
        schema: Schema,
        rows: Iterable[Row] = (),
    ) -> None:
        self._name = name
        self._schema = schema
        self._rows: list[Row] = []
        self.lock = threading.RLock()
        for row in rows:
            self.append(row)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def rows(self) -> tuple[Row, ...]:
        """Snapshot of the rows in storage order."""
        return tuple(self._rows)

    def append(self, row: Row) -> None:
        """Append a row at the end.

        Raises:
            ValueError: If the row's arity differs from the schema.
            TypeError: If a value's type differs from its attribute's type.
        """
        self._check(row)
        self._rows.append(row)

    def replace_rows(self, rows: Iterable[Row]) -> None:
        """Replace the whole row sequence.

        All rows are checked before anything is replaced.
        """
        replacement = list(rows)
        for row in replacement:
            self._check(row)
        self._rows = replacement

    def truncate(self) -> None:
        self._rows = []

    def _check(self, row: Row) -> None:
        # Row.build performs the arity and type checks.
        Row.build(self._schema, row.values)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(tuple(self._rows))

    def __repr__(self) -> str:
        label = self._name if self._name is not None else "<result>"
        return f"Table({label}{self._schema}, rows={len(self._rows)})"
