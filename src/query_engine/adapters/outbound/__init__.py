"""Outbound adapters - implementations of outbound ports.

These adapters implement external dependencies, currently the schema and
table files behind the PersistenceGateway port.
"""

from query_engine.adapters.outbound.csv_persistence import CsvPersistenceGateway

__all__ = [
    "CsvPersistenceGateway",
]
