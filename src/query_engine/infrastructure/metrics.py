"""Prometheus metrics for the query engine."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all query engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "query_statements_total",
            "Total number of statements executed",
            ["statement", "status"],  # status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "query_statement_latency_seconds",
            "Statement latency in seconds",
            ["statement"],  # parse, select, insert, delete
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        self.rows_affected_total = Counter(
            "query_rows_affected_total",
            "Rows returned by SELECT or changed by INSERT/DELETE",
            ["statement"],
            registry=self._registry,
        )

        # Persistence metrics
        self.persistence_failures_total = Counter(
            "query_persistence_failures_total",
            "Writes to table files that failed after the in-memory mutation",
            ["operation"],  # append, rewrite
            registry=self._registry,
        )

        # Catalog metrics
        self.tables_loaded = Gauge(
            "query_tables_loaded",
            "Number of tables loaded into the catalog",
            registry=self._registry,
        )

        self.info = Info(
            "query_engine",
            "Query engine information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    if _metrics is None or registry is not None:
        _metrics = MetricsRegistry(registry)

    from query_engine import __version__
    _metrics.info.info({"version": __version__})

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
