"""
Makler CRM - Core Business Logic

Field-mapping and data-integrity layer between the CRM's write API and its
persistence, plus remote document storage on the office NAS:

1. Schema (authoritative column declarations per table)
2. Field Mapping (request field names -> column names)
3. Schema Validation (mandatory unknown-field gate)
4. Record Service (create/update orchestration, one write per call)
5. Storage (property folder layout, WebDAV/FTP gateway)
"""

from .schema import Column, ColumnType, TableSchema, PROPERTIES, CONTACTS, get_table

from .mapping import (
    FieldMapping,
    PROPERTY_MAPPING,
    map_fields,
    find_unknown_fields,
    MappingAmbiguityError,
    ValidationError,
    UnknownFieldError,
    EntityKind,
    EntityDefinition,
    get_entity,
)

from .records import (
    RecordService,
    RecordStore,
    InMemoryRecordStore,
    IntegrityError,
    RecordNotFoundError,
    get_record_store,
)

from .storage import (
    FileStoreGateway,
    PropertyAddress,
    PropertyCategory,
    StorageError,
    build_gateway,
    folder_name,
    category_path,
)

__all__ = [
    # Schema
    "Column",
    "ColumnType",
    "TableSchema",
    "PROPERTIES",
    "CONTACTS",
    "get_table",
    # Mapping
    "FieldMapping",
    "PROPERTY_MAPPING",
    "map_fields",
    "find_unknown_fields",
    "MappingAmbiguityError",
    "ValidationError",
    "UnknownFieldError",
    "EntityKind",
    "EntityDefinition",
    "get_entity",
    # Records
    "RecordService",
    "RecordStore",
    "InMemoryRecordStore",
    "IntegrityError",
    "RecordNotFoundError",
    "get_record_store",
    # Storage
    "FileStoreGateway",
    "PropertyAddress",
    "PropertyCategory",
    "StorageError",
    "build_gateway",
    "folder_name",
    "category_path",
]
