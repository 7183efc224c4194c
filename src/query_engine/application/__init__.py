"""Application layer - orchestrates domain services.

Exports:
    - DatabaseEngine: Entry point that parses and executes statements
    - QueryExecutor: Runs parsed statements against a catalog
    - ExecutionResult: Outcome of one statement
"""

from query_engine.application.database_engine import DatabaseEngine
from query_engine.application.executor import ExecutionResult, QueryExecutor

__all__ = [
    "DatabaseEngine",
    "QueryExecutor",
    "ExecutionResult",
]
