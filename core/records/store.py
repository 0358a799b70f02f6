"""
Record Store - Persistence Layer for CRM Tables

Defines the persistence interface the record service writes through and an
in-memory implementation with optional JSON file persistence.

The in-memory store behaves like the relational database it stands in for:
it owns ids and timestamps, rejects columns the table does not declare and
enforces NOT NULL constraints. It does not coerce values.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

from core.schema import TableSchema, get_table


logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class IntegrityError(Exception):
    """Raised when a write violates a table constraint."""

    def __init__(self, table: str, message: str):
        self.table = table
        super().__init__(f"{table}: {message}")


class RecordNotFoundError(LookupError):
    """Raised when an update targets a row that does not exist."""

    def __init__(self, table: str, record_id: int):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table}: no row with id {record_id}")


# =============================================================================
# Interface
# =============================================================================


class RecordStore(Protocol):
    """Persistence operations used by the record service."""

    def insert(self, table: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored (including id)."""
        ...

    def update(self, table: str, record_id: int, fields: dict[str, Any]) -> None:
        ...

    def select_by_id(self, table: str, record_id: int) -> Optional[dict[str, Any]]:
        ...

    def delete(self, table: str, record_id: int) -> bool:
        ...


# =============================================================================
# In-Memory Store
# =============================================================================


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class InMemoryRecordStore:
    """
    Dict-backed record store.

    Rows are kept per table keyed by id. When ``persist_path`` is given every
    write is flushed to a JSON file and existing data is loaded on start.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise store.

        Args:
            persist_path: Optional path to persist data to JSON file
        """
        self._rows: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id: dict[str, int] = {}
        self._lock = threading.Lock()
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(self) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "tables": {
                table: {str(rid): row for rid, row in rows.items()}
                for table, rows in self._rows.items()
            },
            "next_id": self._next_id,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(data, indent=2, default=str))

    def _load_from_file(self) -> None:
        """Load data from file."""
        try:
            data = json.loads(self._persist_path.read_text())
            for table, rows in data.get("tables", {}).items():
                self._rows[table] = {int(rid): row for rid, row in rows.items()}
            self._next_id = {k: int(v) for k, v in data.get("next_id", {}).items()}
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("Could not load record store data from %s: %s", self._persist_path, e)

    def _check_columns(self, schema: TableSchema, fields: dict[str, Any]) -> None:
        unknown = [key for key in fields if key not in schema]
        if unknown:
            raise IntegrityError(schema.name, f"Unknown column(s): {', '.join(unknown)}")
        read_only = [key for key in fields if key in schema.read_only_columns]
        if read_only:
            raise IntegrityError(schema.name, f"Column(s) are read-only: {', '.join(read_only)}")

    @staticmethod
    def _check_not_null(schema: TableSchema, row: dict[str, Any]) -> None:
        for column in schema.columns:
            if not column.nullable and row.get(column.name) is None:
                raise IntegrityError(
                    schema.name, f"Column '{column.name}' cannot be null"
                )

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def insert(self, table: str, fields: dict[str, Any]) -> dict[str, Any]:
        schema = get_table(table)
        self._check_columns(schema, fields)

        with self._lock:
            row: dict[str, Any] = {
                column.name: column.default
                for column in schema.columns
                if not column.read_only
            }
            row.update(fields)

            record_id = self._next_id.get(table, 1)
            timestamp = _now()
            row["id"] = record_id
            row["createdAt"] = timestamp
            row["updatedAt"] = timestamp
            self._check_not_null(schema, row)

            self._rows.setdefault(table, {})[record_id] = row
            self._next_id[table] = record_id + 1
            self._save_to_file()

        logger.info("Inserted %s row %d (%d fields)", table, record_id, len(fields))
        return dict(row)

    def update(self, table: str, record_id: int, fields: dict[str, Any]) -> None:
        schema = get_table(table)
        self._check_columns(schema, fields)

        with self._lock:
            current = self._rows.get(table, {}).get(record_id)
            if current is None:
                raise RecordNotFoundError(table, record_id)

            updated = {**current, **fields, "updatedAt": _now()}
            self._check_not_null(schema, updated)
            self._rows[table][record_id] = updated
            self._save_to_file()

        logger.info("Updated %s row %d: %s", table, record_id, sorted(fields))

    def select_by_id(self, table: str, record_id: int) -> Optional[dict[str, Any]]:
        get_table(table)
        with self._lock:
            row = self._rows.get(table, {}).get(record_id)
            return dict(row) if row is not None else None

    def delete(self, table: str, record_id: int) -> bool:
        get_table(table)
        with self._lock:
            rows = self._rows.get(table, {})
            if record_id not in rows:
                return False
            del rows[record_id]
            self._save_to_file()
        return True

    def count(self, table: str) -> int:
        with self._lock:
            return len(self._rows.get(table, {}))


# =============================================================================
# Singleton Instance
# =============================================================================

_store_instance: Optional[InMemoryRecordStore] = None


def get_record_store(persist_path: Optional[str] = None) -> InMemoryRecordStore:
    """
    Get the record store singleton.

    Args:
        persist_path: Optional path for persistence (only used on first call)
    """
    global _store_instance
    if _store_instance is None:
        _store_instance = InMemoryRecordStore(persist_path)
    return _store_instance


def reset_record_store() -> None:
    """Drop the singleton (tests and config reloads)."""
    global _store_instance
    _store_instance = None
