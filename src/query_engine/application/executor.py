"""Query Executor.

Runs parsed statements against the tables of a catalog:

- SELECT scans the source table in storage order and builds a fresh,
  unnamed result table holding projected copies of the matching rows.
- INSERT validates the column list and literals, appends one row and
  asks the persistence gateway to append it durably.
- DELETE scans the table, keeps the rows whose condition is false and asks
  the gateway to rewrite the table.

Validation always completes before anything is mutated, so a failed
statement leaves the table unchanged. A persistence failure after the
in-memory mutation is logged and reported on the result, and the mutation
is kept.

Thread Safety:
    Each statement holds the target table's lock from resolve to persist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from query_engine.adapters.inbound.sql_parser import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    Statement,
    StatementType,
)
from query_engine.domain.entities import Catalog, Row, Table
from query_engine.domain.exceptions import ArityMismatch, DuplicateAttribute, QueryError
from query_engine.domain.services import ConditionEvaluator, coerce_literal, ensure_storable
from query_engine.infrastructure.logging import get_logger
from query_engine.ports.outbound.persistence_gateway import (
    PersistenceError,
    PersistenceGateway,
)

if TYPE_CHECKING:
    from query_engine.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)


@dataclass
class ExecutionResult:
    """Result of executing one statement.

    ``error`` is set when the statement was rejected; ``persisted`` is False
    when the statement was applied in memory but the gateway write failed.
    """

    statement_type: StatementType | None = None
    table: Table | None = None
    affected_rows: int = 0
    persisted: bool = True
    message: str = ""
    error: QueryError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def columns(self) -> list[str]:
        if self.table is None:
            return []
        return list(self.table.schema.names)

    @property
    def rows(self) -> list[tuple[Any, ...]]:
        """Result rows as plain Python value tuples."""
        if self.table is None:
            return []
        return [row.as_python() for row in self.table]

    @classmethod
    def failure(
        cls, error: QueryError, statement_type: StatementType | None = None
    ) -> ExecutionResult:
        return cls(
            statement_type=statement_type,
            persisted=False,
            message=error.message,
            error=error,
        )


class QueryExecutor:
    """Executes statements against an explicit catalog."""

    def __init__(
        self,
        catalog: Catalog,
        gateway: PersistenceGateway,
        evaluator: ConditionEvaluator | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._catalog = catalog
        self._gateway = gateway
        self._evaluator = evaluator or ConditionEvaluator()
        self._metrics = metrics

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def execute(self, statement: Statement) -> ExecutionResult:
        """Execute a statement.

        Args:
            statement: The parsed statement to run.

        Returns:
            ExecutionResult for the statement.

        Raises:
            QueryError: The first validation error encountered.
        """
        if isinstance(statement, SelectStatement):
            table = self.execute_select(statement)
            return ExecutionResult(
                statement_type=StatementType.SELECT,
                table=table,
                affected_rows=len(table),
                message=f"OK: {_rows(len(table))} selected",
            )
        elif isinstance(statement, InsertStatement):
            return self.execute_insert(statement)
        elif isinstance(statement, DeleteStatement):
            return self.execute_delete(statement)
        else:
            raise TypeError(f"Unsupported statement type: {type(statement).__name__}")

    def execute_select(self, statement: SelectStatement) -> Table:
        """Run a SELECT and return a new, unnamed result table.

        Raises:
            TableNotFound: If the source table does not exist.
            UnknownAttribute: If a projected or conditioned attribute does
                not exist.
            DuplicateAttribute: If an attribute is projected twice.
            InvalidLiteral: If the condition literal does not fit its type.
            UnsupportedOperator: If the operator is not valid for the type.
        """
        source = self._catalog.resolve(statement.table_name)
        schema = source.schema

        names = schema.names if statement.select_all else statement.attributes
        ordinals = [schema.index_of(name) for name in names]
        seen: set[str] = set()
        for name in names:
            if name in seen:
                raise DuplicateAttribute(name)
            seen.add(name)
        result_schema = schema.project(names)

        with source.lock:
            bound = (
                self._evaluator.bind(statement.condition, schema)
                if statement.condition is not None
                else None
            )
            result = Table(None, result_schema)
            for row in source:
                if bound is None or bound.matches(row):
                    result.append(row.project(ordinals))

        self._count_rows(StatementType.SELECT, len(result))
        return result

    def execute_insert(self, statement: InsertStatement) -> ExecutionResult:
        """Run an INSERT of exactly one row.

        Raises:
            TableNotFound: If the table does not exist.
            ArityMismatch: If the attribute and literal lists differ in
                length, or the attribute list is not the full schema in order.
            InvalidLiteral: If a literal does not fit its attribute's type, or
                holds text the data file format cannot store.
        """
        table = self._catalog.resolve(statement.table_name)
        schema = table.schema

        with table.lock:
            if len(statement.attributes) != len(statement.literals):
                raise ArityMismatch(
                    f"{len(statement.attributes)} attributes but "
                    f"{len(statement.literals)} values",
                    expected=len(statement.attributes),
                    actual=len(statement.literals),
                )
            if tuple(statement.attributes) != schema.names:
                raise ArityMismatch(
                    f"Attribute list ({', '.join(statement.attributes)}) must match "
                    f"the schema of {table.name} {schema}",
                    expected=schema.arity,
                    actual=len(statement.attributes),
                )

            values = [
                coerce_literal(attribute.type, literal)
                for attribute, literal in zip(schema.attributes, statement.literals)
            ]
            ensure_storable(values, statement.literals)
            row = Row.build(schema, values)
            table.append(row)

            persisted, note = self._persist("append", table, self._gateway.append_row, row)

        self._count_rows(StatementType.INSERT, 1)
        logger.debug("row_inserted", table=table.name, persisted=persisted)
        return ExecutionResult(
            statement_type=StatementType.INSERT,
            affected_rows=1,
            persisted=persisted,
            message=f"OK: 1 row inserted into {table.name}{note}",
        )

    def execute_delete(self, statement: DeleteStatement) -> ExecutionResult:
        """Run a DELETE, with or without a condition.

        Rows are replaced only after the whole scan succeeded.

        Raises:
            TableNotFound: If the table does not exist.
            UnknownAttribute: If the conditioned attribute does not exist.
            InvalidLiteral: If the condition literal does not fit its type.
            UnsupportedOperator: If the operator is not valid for the type.
        """
        table = self._catalog.resolve(statement.table_name)

        with table.lock:
            before = len(table)
            if statement.condition is None:
                table.truncate()
            else:
                bound = self._evaluator.bind(statement.condition, table.schema)
                retained = [row for row in table if not bound.matches(row)]
                table.replace_rows(retained)
            deleted = before - len(table)

            persisted, note = self._persist("rewrite", table, self._gateway.rewrite_table)

        self._count_rows(StatementType.DELETE, deleted)
        logger.debug("rows_deleted", table=table.name, deleted=deleted, persisted=persisted)
        return ExecutionResult(
            statement_type=StatementType.DELETE,
            affected_rows=deleted,
            persisted=persisted,
            message=f"OK: {_rows(deleted)} deleted from {table.name}{note}",
        )

    def _persist(self, operation: str, table: Table, write: Any, *args: Any) -> tuple[bool, str]:
        """Call a gateway write; report a failure instead of raising it."""
        try:
            write(table, *args)
        except (PersistenceError, OSError) as e:
            logger.error(
                "persistence_failed",
                operation=operation,
                table=table.name,
                error=str(e),
            )
            if self._metrics is not None:
                self._metrics.persistence_failures_total.labels(operation=operation).inc()
            return False, f" (not persisted: {e})"
        return True, ""

    def _count_rows(self, statement_type: StatementType, count: int) -> None:
        if self._metrics is not None and count:
            self._metrics.rows_affected_total.labels(statement=statement_type.value).inc(count)


def _rows(count: int) -> str:
    return f"{count} row" if count == 1 else f"{count} rows"
