"""Domain entities for the query engine.

Exports:
    Schema:
        - Attribute: Named, typed column
        - Schema: Ordered, immutable attribute list

    Row:
        - Row: Immutable, schema-conformant tuple of values

    Table:
        - Table: Named schema-bound ordered row collection

    Catalog:
        - Catalog: All tables, looked up case-insensitively by name
"""

from query_engine.domain.entities.catalog import Catalog
from query_engine.domain.entities.row import Row
from query_engine.domain.entities.schema import Attribute, Schema
from query_engine.domain.entities.table import Table

__all__ = [
    "Attribute",
    "Schema",
    "Row",
    "Table",
    "Catalog",
]
