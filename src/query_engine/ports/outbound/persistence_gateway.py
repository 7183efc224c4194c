"""Persistence Gateway port for durable schema and table storage.

This outbound port defines the contract between the query engine and the
files that hold its schemas and table data. The engine never touches files
directly: it loads the catalog once at startup and then reports every
mutation through this port.

The gateway is responsible for:
- Reading the schema definitions and building empty tables
- Loading every table's rows into the catalog
- Appending a single row after an INSERT
- Rewriting a whole table after a DELETE

Failure Semantics:
    A failed append or rewrite raises PersistenceError (or OSError). The
    executor reports it but does not undo the in-memory mutation, so memory
    and disk may diverge until the next successful rewrite.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol

from query_engine.domain.entities import Catalog, Row, Table


class PersistenceError(Exception):
    """Durable storage could not be read or written."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class SchemaFileError(PersistenceError):
    """The schema file is missing or malformed."""


class DataFileError(PersistenceError):
    """A table data file holds a line that does not fit the table schema."""

    def __init__(self, message: str, path: Path | str, line_number: int) -> None:
        super().__init__(f"{message} at line {line_number}", path)
        self.line_number = line_number


class PersistenceGateway(Protocol):
    """Protocol for durable schema/table I/O.

    Thread Safety:
        Callers serialize writes per table (the executor holds the table's
        lock while calling append_row/rewrite_table).
    """

    @abstractmethod
    def load_catalog(self) -> Catalog:
        """Read all schemas and table data.

        Returns:
            A catalog holding one populated table per schema entry.

        Raises:
            SchemaFileError: If the schema file cannot be read or parsed.
            DataFileError: If a data file line does not fit its schema.
        """
        ...

    @abstractmethod
    def append_row(self, table: Table, row: Row) -> None:
        """Durably append one row to the table's data.

        Raises:
            PersistenceError: If the write fails.
        """
        ...

    @abstractmethod
    def rewrite_table(self, table: Table) -> None:
        """Durably replace the table's data with its current rows.

        Raises:
            PersistenceError: If the write fails.
        """
        ...
