"""
Makler CRM - Field Mapping and Data Integrity

Translates request field names to schema column names, checks payload keys
against the schema, and normalises values before persistence.
"""

from core.mapping.errors import (
    MappingAmbiguityError,
    ValidationError,
    UnknownFieldError,
)
from core.mapping.field_map import (
    FieldMapping,
    PROPERTY_FIELD_PAIRS,
    PROPERTY_MAPPING,
    CONTACT_MAPPING,
    check_disjoint,
    map_fields,
)
from core.mapping.validator import (
    PROPERTY_FIELDS,
    CONTACT_FIELDS,
    find_unknown_fields,
    require_known_fields,
)
from core.mapping.values import (
    UNSET,
    PROPERTY_ENUM_VALUES,
    normalise_values,
    filter_for_create,
    filter_for_update,
)
from core.mapping.entities import (
    EntityKind,
    EntityDefinition,
    PROPERTY,
    CONTACT,
    ENTITIES,
    get_entity,
)

__all__ = [
    # Errors
    "MappingAmbiguityError",
    "ValidationError",
    "UnknownFieldError",
    # Mapping
    "FieldMapping",
    "PROPERTY_FIELD_PAIRS",
    "PROPERTY_MAPPING",
    "CONTACT_MAPPING",
    "check_disjoint",
    "map_fields",
    # Validator
    "PROPERTY_FIELDS",
    "CONTACT_FIELDS",
    "find_unknown_fields",
    "require_known_fields",
    # Values
    "UNSET",
    "PROPERTY_ENUM_VALUES",
    "normalise_values",
    "filter_for_create",
    "filter_for_update",
    # Entities
    "EntityKind",
    "EntityDefinition",
    "PROPERTY",
    "CONTACT",
    "ENTITIES",
    "get_entity",
]
