"""
Record Service - Create and Update Orchestration

Every write goes through the same pipeline:

1. rename request fields to column names (``map_fields``)
2. reject read-only columns and unknown fields (mandatory gate)
3. normalise enum and date values
4. filter values (create and update differ, see below)
5. exactly one store call

Create drops None and empty strings so no blank defaults are inserted, and
fails when nothing is left. Update keeps explicit None (and turns empty
strings into None) so optional fields can be cleared; an update with nothing
left is a logged no-op.

Store errors propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from core.mapping import (
    EntityDefinition,
    ValidationError,
    filter_for_create,
    filter_for_update,
    map_fields,
    normalise_values,
    require_known_fields,
)
from core.records.store import RecordStore


logger = logging.getLogger(__name__)


class RecordService:
    """
    Write orchestrator for one entity type.

    Args:
        store: Persistence layer
        entity: Entity definition (table, mapping, enum values)
    """

    def __init__(self, store: RecordStore, entity: EntityDefinition):
        self._store = store
        self._entity = entity

    @property
    def entity(self) -> EntityDefinition:
        return self._entity

    def prepare(self, raw_payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Map, gate and normalise a request payload without writing it.

        Raises:
            ValidationError: If read-only columns are present
            UnknownFieldError: If any key is not a schema column after mapping
        """
        entity = self._entity
        mapped = map_fields(raw_payload, entity.mapping)

        read_only = [key for key in mapped if key in entity.table.read_only_columns]
        if read_only:
            raise ValidationError(
                [f"Read-only field(s) cannot be written: {', '.join(read_only)}"],
                entity=entity.name,
            )

        require_known_fields(mapped, entity.valid_fields, entity=entity.name)
        return normalise_values(mapped, entity.table, entity.enum_values)

    def create_entity(self, raw_payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Insert a new row.

        Returns:
            The persisted row

        Raises:
            ValidationError: If no persistable field remains
            UnknownFieldError: If the payload has unknown fields
        """
        fields = filter_for_create(self.prepare(raw_payload))
        if not fields:
            raise ValidationError(
                ["No fields to insert after mapping and filtering"],
                entity=self._entity.name,
            )

        logger.debug("Creating %s with fields %s", self._entity.name, sorted(fields))
        return self._store.insert(self._entity.table.name, fields)

    def update_entity(self, record_id: int, raw_payload: Mapping[str, Any]) -> None:
        """
        Update an existing row.

        An empty field set after filtering is not an error: partial-update
        callers may submit no-op diffs.
        """
        fields = filter_for_update(self.prepare(raw_payload))
        if not fields:
            logger.warning(
                "No fields to update for %s %s - skipping write",
                self._entity.name,
                record_id,
            )
            return

        logger.debug("Updating %s %s with fields %s", self._entity.name, record_id, sorted(fields))
        self._store.update(self._entity.table.name, record_id, fields)

    def get_entity(self, record_id: int) -> Optional[dict[str, Any]]:
        return self._store.select_by_id(self._entity.table.name, record_id)
