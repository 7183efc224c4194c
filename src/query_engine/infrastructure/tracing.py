"""OpenTelemetry tracing for statement execution.

Every statement produces a ``query.parse`` span followed, if it parsed, by a
``query.<select|insert|delete>`` span built by ``statement_span``. Statement
spans carry the database semantic-convention attributes (``db.system``,
``db.operation``, ``db.sql.table``) and are marked as errors when the
statement is rejected.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

from query_engine.domain.exceptions import QueryError

DB_SYSTEM = "query_engine"

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None


def setup_tracing(
    service_name: str = "query_engine",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    The global tracer provider can only be installed once per process, so a
    second call (another container in the same process) reuses it and only
    adds the requested exporters.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317")
        console_export: Whether to also export to console (for debugging)

    Returns:
        Configured tracer instance
    """
    global _tracer, _provider

    if _provider is None:
        from query_engine import __version__

        resource = Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
            }
        )
        _provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(_provider)

    if otlp_endpoint:
        _provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        _provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    _tracer = _provider.get_tracer(service_name)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("query_engine")
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a trace span.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span

    Yields:
        The created span
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        yield span


@contextmanager
def statement_span(operation: str, table_name: str) -> Generator[trace.Span, None, None]:
    """Span around executing one parsed statement.

    A ``QueryError`` leaving the block sets ``query.error`` to its kind and
    the span status to ERROR, then propagates.

    Args:
        operation: ``select``, ``insert`` or ``delete``.
        table_name: Table named by the statement.
    """
    attributes = {
        "db.system": DB_SYSTEM,
        "db.operation": operation.upper(),
        "db.sql.table": table_name,
    }
    with trace_span(f"query.{operation}", attributes) as span:
        try:
            yield span
        except QueryError as e:
            record_rejection(span, e)
            raise


def record_rejection(span: trace.Span, error: QueryError) -> None:
    """Mark ``span`` as failed by a rejected statement."""
    span.set_attribute("query.error", error.kind)
    span.set_status(Status(StatusCode.ERROR, error.message))
