"""Dependency injection container for the query engine."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from opentelemetry import trace

from query_engine.adapters.outbound import CsvPersistenceGateway
from query_engine.application import DatabaseEngine
from query_engine.infrastructure.config import Config, get_config
from query_engine.infrastructure.logging import get_logger, setup_logging
from query_engine.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from query_engine.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Wires configuration, observability and the engine together."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    gateway: CsvPersistenceGateway
    engine: DatabaseEngine

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create the container with all dependencies.

        The engine is returned unstarted.

        Args:
            config: Configuration to use (default: ``get_config()``).
        """
        config = config or get_config()
        observability = config.observability

        setup_logging(level=observability.log_level, log_format=observability.log_format)
        logger = get_logger("query_engine")
        tracer = setup_tracing(
            service_name=observability.otel_service_name,
            otlp_endpoint=observability.otel_endpoint,
        )
        if observability.metrics_enabled:
            metrics = setup_metrics(port=config.server.metrics_port)
        else:
            metrics = get_metrics()

        storage = config.storage
        gateway = CsvPersistenceGateway(
            data_dir=storage.data_dir,
            schema_file=storage.schema_file,
            table_suffix=storage.table_suffix,
            sync_writes=storage.sync_writes,
        )
        engine = DatabaseEngine(gateway, metrics=metrics)

        logger.debug(
            "container_initialized",
            data_dir=str(storage.data_dir),
            metrics_enabled=observability.metrics_enabled,
        )

        return cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            gateway=gateway,
            engine=engine,
        )
