"""Database Engine - Unified entry point for the query engine.

This module provides the DatabaseEngine class that ties the parser, the
executor and the persistence gateway together behind a single
``execute(sql)`` call.

Usage:
    from query_engine.adapters.outbound import CsvPersistenceGateway
    from query_engine.application import DatabaseEngine

    db = DatabaseEngine(CsvPersistenceGateway("db"))
    db.start()

    result = db.execute("INSERT INTO Students (sid, name, age) VALUES ('s1', 'Alice', 20)")
    result = db.execute("SELECT name, age FROM Students WHERE age >= 18")
    result.rows  # [("Alice", 20)]

    db.stop()
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, Any

from query_engine.adapters.inbound.sql_parser import SQLParser
from query_engine.application.executor import ExecutionResult, QueryExecutor
from query_engine.domain.entities import Catalog
from query_engine.domain.exceptions import QueryError
from query_engine.domain.services import ConditionEvaluator
from query_engine.infrastructure.logging import get_logger, statement_context
from query_engine.infrastructure.tracing import record_rejection, statement_span, trace_span
from query_engine.ports.outbound.persistence_gateway import PersistenceGateway

if TYPE_CHECKING:
    from query_engine.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)


class DatabaseEngine:
    """Main engine that orchestrates parsing, execution and persistence.

    Statement errors never escape ``execute``: they come back as an
    ExecutionResult with ``error`` set. Persistence errors raised while
    loading the catalog abort ``start``.

    Thread Safety:
        Multiple threads can share a started engine. Statements on the same
        table are serialized by the table's lock.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        parser: SQLParser | None = None,
        evaluator: ConditionEvaluator | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            gateway: Source of the catalog and sink for table writes.
            parser: Statement parser (default: a new SQLParser).
            evaluator: Condition evaluator passed to the executor.
            metrics: Metrics registry; no metrics are recorded if None.
        """
        self._gateway = gateway
        self._parser = parser or SQLParser()
        self._evaluator = evaluator or ConditionEvaluator()
        self._metrics = metrics

        self._catalog: Catalog | None = None
        self._executor: QueryExecutor | None = None
        self._started = False
        self._statements_executed = 0
        self._statements_failed = 0
        self._stats_lock = threading.Lock()

    @property
    def is_started(self) -> bool:
        """Check if the engine is started."""
        return self._started

    @property
    def catalog(self) -> Catalog:
        """The loaded catalog.

        Raises:
            RuntimeError: If the engine is not started.
        """
        if self._catalog is None:
            raise RuntimeError("Database engine not started")
        return self._catalog

    def start(self) -> None:
        """Load the catalog and prepare the executor.

        Raises:
            RuntimeError: If already started.
            PersistenceError: If the schema or a data file cannot be loaded.
        """
        if self._started:
            raise RuntimeError("Database engine already started")

        with trace_span("query.start"):
            catalog = self._gateway.load_catalog()

        self._catalog = catalog
        self._executor = QueryExecutor(
            catalog=catalog,
            gateway=self._gateway,
            evaluator=self._evaluator,
            metrics=self._metrics,
        )
        if self._metrics is not None:
            self._metrics.tables_loaded.set(len(catalog))

        self._started = True
        logger.info("engine_started", tables=catalog.table_names)

    def stop(self) -> None:
        """Release the catalog.

        Every mutation has already been written through the gateway, so
        there is nothing to flush.

        Raises:
            RuntimeError: If not started.
        """
        if not self._started:
            raise RuntimeError("Database engine not started")

        self._catalog = None
        self._executor = None
        self._started = False
        if self._metrics is not None:
            self._metrics.tables_loaded.set(0)
        logger.info("engine_stopped")

    def execute(self, sql: str) -> ExecutionResult:
        """Parse and execute one statement.

        Args:
            sql: The statement text.

        Returns:
            ExecutionResult; ``error`` is set if the statement was rejected.

        Raises:
            RuntimeError: If the engine is not started.
        """
        if not self._started or self._executor is None:
            raise RuntimeError("Database engine not started")

        start = time.perf_counter()
        with statement_context(sql):
            with trace_span("query.parse") as span:
                try:
                    statement = self._parser.parse(sql)
                except QueryError as e:
                    record_rejection(span, e)
                    result = ExecutionResult.failure(e)
                    self._record("parse", result, start)
                    return result

            statement_type = statement.statement_type
            try:
                with statement_span(statement_type.value, statement.table_name) as span:
                    result = self._executor.execute(statement)
                    span.set_attribute("query.affected_rows", result.affected_rows)
                    span.set_attribute("query.persisted", result.persisted)
            except QueryError as e:
                result = ExecutionResult.failure(e, statement_type)

            self._record(statement_type.value, result, start)
        return result

    def execute_many(self, statements: list[str]) -> list[ExecutionResult]:
        """Execute multiple statements in order.

        A rejected statement does not stop the ones after it.

        Args:
            statements: List of statement texts.

        Returns:
            List of ExecutionResult, one per statement.
        """
        return [self.execute(sql) for sql in statements]

    def _record(self, statement: str, result: ExecutionResult, start: float) -> None:
        elapsed = time.perf_counter() - start
        with self._stats_lock:
            self._statements_executed += 1
            if not result.success:
                self._statements_failed += 1

        if self._metrics is not None:
            status = "success" if result.success else "error"
            self._metrics.statements_total.labels(statement=statement, status=status).inc()
            self._metrics.statement_latency_seconds.labels(statement=statement).observe(elapsed)

        if result.error is not None:
            logger.info(
                "statement_rejected",
                statement=statement,
                error=result.error.kind,
                message=result.error.message,
            )
        else:
            logger.debug(
                "statement_executed",
                statement=statement,
                affected_rows=result.affected_rows,
                persisted=result.persisted,
                duration_ms=round(elapsed * 1000, 3),
            )

    def get_stats(self) -> dict[str, Any]:
        """Get engine statistics.

        Returns:
            Dictionary with table sizes and statement counters.
        """
        stats: dict[str, Any] = {
            "started": self._started,
            "statements_executed": self._statements_executed,
            "statements_failed": self._statements_failed,
        }

        if self._catalog is not None:
            stats["tables"] = {table.name: len(table) for table in self._catalog}

        return stats

    def __enter__(self) -> DatabaseEngine:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
