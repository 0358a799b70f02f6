"""
Entity Definitions - Closed Key Sets per Writable Entity

Each writable entity binds its table, its request field mapping and its enum
value tables. The set of keys a request may carry is exactly the table's
columns plus the mapping's external names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Mapping

from core.mapping.field_map import CONTACT_MAPPING, PROPERTY_MAPPING, FieldMapping
from core.mapping.values import PROPERTY_ENUM_VALUES
from core.schema import CONTACTS, PROPERTIES, TableSchema


class EntityKind(Enum):
    """Writable entity types."""

    PROPERTY = "property"
    CONTACT = "contact"


@dataclass(frozen=True)
class EntityDefinition:
    """Everything the record service needs to write one entity type."""

    kind: EntityKind
    table: TableSchema
    mapping: FieldMapping
    enum_values: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Every mapping target must be a real column.
        missing = sorted(self.mapping.internal_names - self.table.column_names)
        if missing:
            raise ValueError(
                f"{self.kind.value} mapping targets unknown columns: {', '.join(missing)}"
            )

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def valid_fields(self) -> frozenset[str]:
        """Schema column names (after mapping)."""
        return self.table.column_names

    @property
    def accepted_request_fields(self) -> frozenset[str]:
        """Keys a request may carry before mapping."""
        return self.table.writable_columns | self.mapping.external_names


PROPERTY: Final[EntityDefinition] = EntityDefinition(
    kind=EntityKind.PROPERTY,
    table=PROPERTIES,
    mapping=PROPERTY_MAPPING,
    enum_values=PROPERTY_ENUM_VALUES,
)

CONTACT: Final[EntityDefinition] = EntityDefinition(
    kind=EntityKind.CONTACT,
    table=CONTACTS,
    mapping=CONTACT_MAPPING,
)

ENTITIES: Final[Mapping[EntityKind, EntityDefinition]] = {
    EntityKind.PROPERTY: PROPERTY,
    EntityKind.CONTACT: CONTACT,
}


def get_entity(kind: EntityKind | str) -> EntityDefinition:
    """Look up an entity definition by kind or kind value."""
    return ENTITIES[EntityKind(kind)]
