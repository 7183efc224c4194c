"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the systems the query engine depends
on. The only one is durable storage of schemas and table data.
"""

from query_engine.ports.outbound.persistence_gateway import (
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
