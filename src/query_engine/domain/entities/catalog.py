"""Catalog entity: every table in the system, keyed by name.

The catalog is built once at startup (by the persistence gateway) and passed
explicitly to the executor. Table-name lookup is case-insensitive.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from query_engine.domain.entities.table import Table
from query_engine.domain.exceptions import TableNotFound


class Catalog:
    """Name-keyed set of tables."""

    def __init__(self, tables: Iterable[Table] = ()) -> None:
        self._tables: dict[str, Table] = {}
        for table in tables:
            self.add(table)

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def add(self, table: Table) -> None:
        """Register a table.

        Raises:
            ValueError: If the table is unnamed or the name is already taken
                (compared case-insensitively).
        """
        if table.name is None:
            raise ValueError("Cannot register an unnamed table")
        key = self._key(table.name)
        if key in self._tables:
            raise ValueError(f"Duplicate table name: {table.name!r}")
        self._tables[key] = table

    def resolve(self, table_name: str) -> Table:
        """Return the table called ``table_name``.

        Raises:
            TableNotFound: If no table has that name.
        """
        table = self._tables.get(self._key(table_name))
        if table is None:
            raise TableNotFound(table_name)
        return table

    def __contains__(self, table_name: object) -> bool:
        return isinstance(table_name, str) and self._key(table_name) in self._tables

    def __iter__(self) -> Iterator[Table]:
        return iter(list(self._tables.values()))

    def __len__(self) -> int:
        return len(self._tables)

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self._tables.values() if table.name is not None]
