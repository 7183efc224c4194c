"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (parser, REPL, REST)
- Outbound adapters: Implement external dependencies (schema and table files)
"""

from query_engine.adapters.outbound import CsvPersistenceGateway

__all__ = [
    # Outbound adapters
    "CsvPersistenceGateway",
]
