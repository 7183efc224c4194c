"""CSV/schema-file Persistence Gateway implementation.

This adapter implements the PersistenceGateway protocol on top of a plain
data directory:

File Layout:
    - ``<data_dir>/schema.txt``: one table per line,
      ``Students(sid:Text, name:Text, age:Integer)``. Blank lines and lines
      starting with ``#`` are ignored.
    - ``<data_dir>/<table>.csv``: one row per line, comma-separated fields,
      no quoting or escaping. Fields are trimmed on read.

Durability:
    An append opens the file in append mode and writes a single line. A
    rewrite writes the full table to a temporary file in the same directory
    and moves it over the old one with ``os.replace``, so a crash leaves
    either the old or the new file. Both optionally ``fsync``.

Thread Safety:
    None of its own. The executor holds the table's lock around every call.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Iterable

from query_engine.domain.entities import Attribute, Catalog, Row, Schema, Table
from query_engine.domain.exceptions import InvalidLiteral
from query_engine.domain.services.coercion import (
    FIELD_SEPARATOR,
    UNSTORABLE_CHARACTERS,
    format_value,
    parse_stored_value,
)
from query_engine.domain.value_objects import AttributeType
from query_engine.infrastructure.logging import get_logger
from query_engine.ports.outbound.persistence_gateway import (
    DataFileError,
    PersistenceError,
    SchemaFileError,
)

logger = get_logger(__name__)

_SCHEMA_LINE_RE = re.compile(r"(?P<table>[A-Za-z_]\w*)\s*\((?P<attributes>.*)\)")
_ATTRIBUTE_RE = re.compile(r"(?P<name>[A-Za-z_]\w*)\s*:\s*(?P<type>[A-Za-z]+)")


class CsvPersistenceGateway:
    """File-backed implementation of the PersistenceGateway protocol.

    Attributes:
        data_dir: Directory holding the schema file and table files.
        schema_path: Full path of the schema file.
    """

    def __init__(
        self,
        data_dir: str | Path,
        schema_file: str = "schema.txt",
        table_suffix: str = ".csv",
        sync_writes: bool = True,
    ) -> None:
        """Initialize the gateway.

        Args:
            data_dir: Directory holding the schema file and table files.
            schema_file: Schema file name inside ``data_dir``.
            table_suffix: Suffix appended to a table name to get its file.
            sync_writes: If True, fsync after every append and rewrite.
        """
        self._data_dir = Path(data_dir)
        self._schema_file = schema_file
        self._table_suffix = table_suffix
        self._sync_writes = sync_writes

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def schema_path(self) -> Path:
        return self._data_dir / self._schema_file

    def table_path(self, table_name: str) -> Path:
        """Path of the data file backing ``table_name``."""
        return self._data_dir / f"{table_name}{self._table_suffix}"

    # =========================================================================
    # Reading
    # =========================================================================

    def load_catalog(self) -> Catalog:
        """Read the schema file and every table's data file.

        Returns:
            A catalog with one populated table per schema line.

        Raises:
            SchemaFileError: If the schema file is missing or malformed.
            DataFileError: If a data file line does not fit its schema.
        """
        catalog = Catalog()
        for table_name, schema in self.read_schemas():
            rows = self.read_rows(table_name, schema)
            catalog.add(Table(table_name, schema, rows))

        logger.info(
            "catalog_loaded",
            data_dir=str(self._data_dir),
            tables=catalog.table_names,
        )
        return catalog

    def read_schemas(self) -> list[tuple[str, Schema]]:
        """Parse the schema file into ``(table_name, schema)`` pairs.

        Raises:
            SchemaFileError: If the file is missing, a line is malformed, a
                type is unknown, or a table or attribute name repeats.
        """
        path = self.schema_path
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SchemaFileError("Schema file not found", path) from None
        except OSError as e:
            raise SchemaFileError(f"Cannot read schema file: {e}", path) from e

        schemas: list[tuple[str, Schema]] = []
        seen: set[str] = set()
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            table_name, schema = self._parse_schema_line(line, line_number)
            if table_name.casefold() in seen:
                raise SchemaFileError(
                    f"Duplicate table {table_name!r} at line {line_number}", path
                )
            seen.add(table_name.casefold())
            schemas.append((table_name, schema))

        return schemas

    def _parse_schema_line(self, line: str, line_number: int) -> tuple[str, Schema]:
        match = _SCHEMA_LINE_RE.fullmatch(line)
        if match is None:
            raise SchemaFileError(
                f"Malformed schema line {line_number}: {line!r}", self.schema_path
            )

        attributes: list[Attribute] = []
        for token in match.group("attributes").split(","):
            token = token.strip()
            attribute_match = _ATTRIBUTE_RE.fullmatch(token)
            if attribute_match is None:
                raise SchemaFileError(
                    f"Malformed attribute {token!r} at line {line_number}",
                    self.schema_path,
                )
            try:
                attribute_type = AttributeType.from_name(attribute_match.group("type"))
            except ValueError:
                raise SchemaFileError(
                    f"Unknown type {attribute_match.group('type')!r} at line {line_number}",
                    self.schema_path,
                ) from None
            attributes.append(Attribute(attribute_match.group("name"), attribute_type))

        try:
            schema = Schema(tuple(attributes))
        except ValueError as e:
            raise SchemaFileError(f"{e} at line {line_number}", self.schema_path) from None

        return match.group("table"), schema

    def read_rows(self, table_name: str, schema: Schema) -> list[Row]:
        """Decode a table's data file.

        A missing data file means an empty table.

        Raises:
            DataFileError: If a line has the wrong number of fields or a
                field does not parse as its attribute's type.
        """
        path = self.table_path(table_name)
        if not path.exists():
            logger.warning("table_file_missing", table=table_name, path=str(path))
            return []

        rows: list[Row] = []
        try:
            with open(path, encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip("\r\n")
                    if not line.strip():
                        continue
                    rows.append(self._decode_row(schema, line, path, line_number))
        except OSError as e:
            raise PersistenceError(f"Cannot read table {table_name!r}: {e}", path) from e

        logger.debug("table_loaded", table=table_name, rows=len(rows))
        return rows

    @staticmethod
    def _decode_row(schema: Schema, line: str, path: Path, line_number: int) -> Row:
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != schema.arity:
            raise DataFileError(
                f"Expected {schema.arity} fields, found {len(fields)}", path, line_number
            )
        try:
            values = [
                parse_stored_value(attribute.type, field.strip())
                for attribute, field in zip(schema.attributes, fields)
            ]
        except InvalidLiteral as e:
            raise DataFileError(e.message, path, line_number) from None
        return Row.build(schema, values)

    # =========================================================================
    # Writing
    # =========================================================================

    def append_row(self, table: Table, row: Row) -> None:
        """Append one line to the table's data file.

        Raises:
            PersistenceError: If the value cannot be encoded or the write fails.
        """
        path = self.table_path(self._require_name(table))
        line = self._encode_row(row, path)

        try:
            # A file written by hand may lack its final newline.
            if not self._ends_with_newline(path):
                line = "\n" + line
            with open(path, "a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
                if self._sync_writes:
                    os.fsync(f.fileno())
        except OSError as e:
            raise PersistenceError(f"Cannot append to table {table.name!r}: {e}", path) from e

        logger.debug("row_appended", table=table.name, path=str(path))

    def rewrite_table(self, table: Table) -> None:
        """Replace the table's data file with the table's current rows.

        Raises:
            PersistenceError: If a value cannot be encoded or the write fails.
        """
        path = self.table_path(self._require_name(table))
        lines = [self._encode_row(row, path) for row in table.rows]
        self._atomic_write(path, lines)
        logger.info("table_rewritten", table=table.name, rows=len(lines))

    @staticmethod
    def _ends_with_newline(path: Path) -> bool:
        if not path.exists() or path.stat().st_size == 0:
            return True
        with open(path, "rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) == b"\n"

    def _atomic_write(self, path: Path, lines: Iterable[str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.writelines(lines)
                f.flush()
                if self._sync_writes:
                    os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise PersistenceError(f"Cannot rewrite table file: {e}", path) from e

    @staticmethod
    def _encode_row(row: Row, path: Path) -> str:
        fields = [format_value(value) for value in row]
        for field in fields:
            if any(c in field for c in UNSTORABLE_CHARACTERS):
                raise PersistenceError(
                    f"Value {field!r} cannot be stored without escaping", path
                )
        line = FIELD_SEPARATOR.join(fields)
        if not line.strip():
            # Blank lines are skipped on read.
            raise PersistenceError("A blank row cannot be stored", path)
        return line + "\n"

    @staticmethod
    def _require_name(table: Table) -> str:
        if table.name is None:
            raise PersistenceError("Cannot persist an unnamed result table")
        return table.name
