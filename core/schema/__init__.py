"""
Makler CRM - Persisted Schema

Authoritative column declarations for every table the CRM writes.
"""

from core.schema.tables import (
    Column,
    ColumnType,
    TableSchema,
    PROPERTIES,
    CONTACTS,
    TABLES,
    get_table,
)

__all__ = [
    "Column",
    "ColumnType",
    "TableSchema",
    "PROPERTIES",
    "CONTACTS",
    "TABLES",
    "get_table",
]
