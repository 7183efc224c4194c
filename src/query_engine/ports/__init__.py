"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts. The query
engine has a single outbound port, the PersistenceGateway; the inbound side
is the DatabaseEngine facade in the application layer.
"""

from query_engine.ports.outbound import (
    DataFileError,
    PersistenceError,
    PersistenceGateway,
    SchemaFileError,
)

__all__ = [
    "PersistenceGateway",
    "PersistenceError",
    "SchemaFileError",
    "DataFileError",
]
