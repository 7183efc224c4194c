"""Structured logging configuration.

Log events go to stderr so that result tables printed by the REPL on stdout
are never interleaved with log lines. Events emitted while a statement runs
carry that statement's context (see ``statement_context``).
"""

from __future__ import annotations

import itertools
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, TextIO

import structlog
from structlog.types import Processor

# Longest statement text copied into a log event.
MAX_LOGGED_SQL = 200

_statement_ids = itertools.count(1)


def _renderer(log_format: str, stream: TextIO) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def setup_logging(
    level: str = "WARNING",
    log_format: str = "console",
    stream: TextIO | None = None,
) -> None:
    """
    Set up structured logging with structlog.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
        stream: Output stream (default: sys.stderr)
    """
    stream = stream or sys.stderr
    numeric_level = getattr(logging, level.upper())

    # uvicorn and the OpenTelemetry exporters log through the standard library
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(log_format, stream),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


@contextmanager
def statement_context(sql: str) -> Iterator[int]:
    """Bind one statement's identity to every event logged inside the block.

    Events gain ``statement_id`` (a process-wide sequence number) and
    ``sql`` (the statement text, cut to ``MAX_LOGGED_SQL`` characters).
    The binding is per thread/task, so concurrent REST requests do not mix.

    Yields:
        The statement id.
    """
    statement_id = next(_statement_ids)
    text = sql.strip()
    if len(text) > MAX_LOGGED_SQL:
        text = text[:MAX_LOGGED_SQL] + "..."
    with structlog.contextvars.bound_contextvars(statement_id=statement_id, sql=text):
        yield statement_id


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
