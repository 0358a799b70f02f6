"""
Persisted Schema - Authoritative Table Definitions

Declares the columns of every table the CRM writes to. This module is the
single source of truth for column names: the set of valid write fields is
derived from these declarations and must never be maintained by hand
elsewhere.

Column names use the stored (camelCase) spelling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Final, Mapping, Optional


# =============================================================================
# Column Types
# =============================================================================


class ColumnType(Enum):
    """Storage type of a column."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ENUM = "enum"
    JSON = "json"


@dataclass(frozen=True)
class Column:
    """
    A single persisted column.

    Attributes:
        name: Column name as stored
        column_type: Storage type
        nullable: False for NOT NULL columns
        read_only: Managed by the store (id, timestamps); never written by callers
        default: Value applied on insert when the column is absent
    """

    name: str
    column_type: ColumnType
    nullable: bool = True
    read_only: bool = False
    default: Any = None


@dataclass(frozen=True)
class TableSchema:
    """Ordered, immutable set of columns for one table."""

    name: str
    columns: tuple[Column, ...]
    _index: Mapping[str, Column] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, Column] = {}
        for column in self.columns:
            if column.name in index:
                raise ValueError(f"Duplicate column {column.name!r} in table {self.name!r}")
            index[column.name] = column
        object.__setattr__(self, "_index", MappingProxyType(index))

    @property
    def column_names(self) -> frozenset[str]:
        """All column names (the valid schema field set)."""
        return frozenset(self._index)

    @property
    def writable_columns(self) -> frozenset[str]:
        """Column names callers may write."""
        return frozenset(c.name for c in self.columns if not c.read_only)

    @property
    def read_only_columns(self) -> frozenset[str]:
        return frozenset(c.name for c in self.columns if c.read_only)

    @property
    def required_columns(self) -> frozenset[str]:
        """NOT NULL columns without a default that callers must supply."""
        return frozenset(
            c.name
            for c in self.columns
            if not c.nullable and not c.read_only and c.default is None
        )

    def get(self, name: str) -> Optional[Column]:
        return self._index.get(name)

    def columns_of_type(self, column_type: ColumnType) -> frozenset[str]:
        return frozenset(c.name for c in self.columns if c.column_type == column_type)

    def __contains__(self, name: object) -> bool:
        return name in self._index


def _columns(column_type: ColumnType, *names: str) -> tuple[Column, ...]:
    return tuple(Column(name, column_type) for name in names)


_ID: Final = Column("id", ColumnType.INTEGER, nullable=False, read_only=True)
_TIMESTAMPS: Final = (
    Column("createdAt", ColumnType.DATETIME, nullable=False, read_only=True),
    Column("updatedAt", ColumnType.DATETIME, nullable=False, read_only=True),
)

INT, DEC, STR, TXT, BOOL, DT, ENUM, JSON = (
    ColumnType.INTEGER,
    ColumnType.DECIMAL,
    ColumnType.STRING,
    ColumnType.TEXT,
    ColumnType.BOOLEAN,
    ColumnType.DATETIME,
    ColumnType.ENUM,
    ColumnType.JSON,
)


# =============================================================================
# Properties
# =============================================================================

PROPERTIES: Final[TableSchema] = TableSchema(
    name="properties",
    columns=(
        _ID,
        # Marketing texts
        Column("title", STR, nullable=False),
        *_columns(STR, "headline"),
        *_columns(
            TXT,
            "description",
            "descriptionObject",
            "descriptionHighlights",
            "descriptionLocation",
            "descriptionFazit",
            "descriptionCTA",
        ),
        # Classification
        Column("propertyType", ENUM, nullable=False),
        *_columns(STR, "subType"),
        Column("marketingType", ENUM, nullable=False),
        Column("status", ENUM, nullable=False, default="available"),
        # Address
        *_columns(STR, "street", "houseNumber", "zipCode", "city", "region"),
        Column("country", STR, default="Deutschland"),
        *_columns(DEC, "latitude", "longitude"),
        # Areas and rooms
        *_columns(DEC, "livingArea", "usableArea", "plotArea", "rooms"),
        *_columns(INT, "bedrooms", "bathrooms", "floors", "floor"),
        *_columns(ENUM, "condition"),
        *_columns(INT, "yearBuilt", "lastModernization"),
        # Features
        *_columns(
            BOOL,
            "hasBalcony",
            "hasTerrace",
            "hasGarden",
            "hasElevator",
            "hasBasement",
            "hasGarage",
            "hasGuestToilet",
            "hasBuiltInKitchen",
        ),
        *_columns(DEC, "balconyTerraceArea", "gardenArea"),
        *_columns(INT, "parkingSpaces"),
        *_columns(STR, "parkingType"),
        *_columns(INT, "parkingPrice"),
        *_columns(ENUM, "furnishingQuality"),
        *_columns(STR, "flooring"),
        *_columns(BOOL, "hasStorageRoom"),
        # Rent and price
        *_columns(INT, "baseRent", "additionalCosts", "heatingCosts", "totalRent", "deposit"),
        *_columns(BOOL, "heatingCostsInServiceCharge"),
        *_columns(INT, "purchasePrice"),
        *_columns(BOOL, "priceOnRequest", "priceByNegotiation"),
        *_columns(STR, "buyerCommission"),
        *_columns(INT, "rentalIncome"),
        *_columns(BOOL, "isRented"),
        # Energy certificate
        *_columns(ENUM, "energyCertificateAvailability"),
        *_columns(DT, "energyCertificateCreationDate"),
        *_columns(ENUM, "energyCertificateType"),
        *_columns(
            DEC,
            "energyConsumption",
            "energyConsumptionElectricity",
            "energyConsumptionHeat",
            "co2Emissions",
        ),
        *_columns(ENUM, "energyClass"),
        *_columns(DT, "energyCertificateIssueDate", "energyCertificateValidUntil"),
        *_columns(BOOL, "includesWarmWater"),
        *_columns(ENUM, "heatingType", "mainEnergySource"),
        *_columns(BOOL, "buildingYearUnknown"),
        # Linked contacts
        *_columns(
            INT,
            "supervisorId",
            "ownerId",
            "buyerId",
            "notaryId",
            "propertyManagementId",
            "tenantId",
        ),
        *_columns(JSON, "linkedContactIds"),
        # Land register
        *_columns(
            STR,
            "districtCourt",
            "courtName",
            "courtCity",
            "landRegisterNumber",
            "landRegisterSheet",
            "landRegisterOf",
            "cadastralDistrict",
            "corridor",
            "parcel",
            "parcelNumber",
            "plotNumber",
        ),
        *_columns(ENUM, "developmentStatus"),
        *_columns(DEC, "siteArea"),
        # Assignment and commission
        *_columns(ENUM, "assignmentType", "assignmentDuration"),
        *_columns(DT, "assignmentFrom", "assignmentTo"),
        *_columns(
            STR,
            "internalCommissionPercent",
            "internalCommissionType",
            "externalCommissionInternalPercent",
            "externalCommissionInternalType",
            "totalCommission",
            "externalCommissionForExpose",
        ),
        *_columns(TXT, "commissionNote"),
        # Portal export
        *_columns(BOOL, "autoSendToPortals", "hideStreetOnPortals"),
        # Portal attributes
        *_columns(STR, "category", "floorLevel"),
        *_columns(INT, "totalFloors", "nonRecoverableCosts", "houseMoney", "maintenanceReserve"),
        *_columns(
            BOOL,
            "isBarrierFree",
            "hasLoggia",
            "isMonument",
            "suitableAsHoliday",
            "hasFireplace",
            "hasPool",
            "hasSauna",
            "hasAlarm",
            "hasWinterGarden",
            "hasAirConditioning",
            "hasParking",
        ),
        *_columns(STR, "bathroomFeatures"),
        *_columns(INT, "heatingSystemYear"),
        *_columns(STR, "buildingPhase", "equipmentQuality"),
        *_columns(DT, "availableFrom"),
        *_columns(STR, "ownerType"),
        # Travel times and distances
        *_columns(
            INT,
            "walkingTimeToPublicTransport",
            "distanceToPublicTransport",
            "drivingTimeToHighway",
            "distanceToHighway",
            "drivingTimeToMainStation",
            "distanceToMainStation",
            "drivingTimeToAirport",
            "distanceToAirport",
        ),
        # Landing page and internal
        *_columns(STR, "landingPageSlug"),
        *_columns(BOOL, "landingPagePublished"),
        *_columns(TXT, "warningNote"),
        *_columns(BOOL, "isArchived"),
        *_columns(TXT, "internalNotes"),
        *_TIMESTAMPS,
    ),
)


# =============================================================================
# Contacts
# =============================================================================

CONTACTS: Final[TableSchema] = TableSchema(
    name="contacts",
    columns=(
        _ID,
        # Module assignment
        *_columns(BOOL, "moduleImmobilienmakler", "moduleVersicherungen", "moduleHausverwaltung"),
        # Type and category
        Column("contactType", ENUM, default="kunde"),
        *_columns(STR, "contactCategory"),
        Column("type", ENUM, default="person"),
        # Personal data
        *_columns(ENUM, "salutation"),
        *_columns(STR, "title", "firstName", "lastName", "language"),
        *_columns(INT, "age"),
        *_columns(DT, "birthDate"),
        *_columns(
            STR,
            "birthPlace",
            "birthCountry",
            "idType",
            "idNumber",
            "issuingAuthority",
            "taxId",
            "nationality",
        ),
        # Communication
        *_columns(STR, "email", "alternativeEmail", "phone", "mobile", "fax", "website"),
        # Address
        *_columns(STR, "street", "houseNumber", "zipCode", "city", "country"),
        # Company
        *_columns(
            STR,
            "companyName",
            "position",
            "companyStreet",
            "companyHouseNumber",
            "companyZipCode",
            "companyCity",
            "companyCountry",
            "companyWebsite",
            "companyPhone",
            "companyMobile",
            "companyFax",
        ),
        *_columns(BOOL, "isBusinessContact"),
        # Handling
        *_columns(STR, "advisor", "coAdvisor"),
        *_columns(DT, "followUpDate"),
        *_columns(STR, "source", "status"),
        *_columns(JSON, "tags"),
        *_columns(BOOL, "archived"),
        *_columns(TXT, "notes"),
        *_columns(STR, "availability"),
        *_columns(BOOL, "blockContact"),
        *_columns(JSON, "sharedWithTeams", "sharedWithUsers"),
        # Data protection
        *_columns(STR, "dsgvoStatus"),
        *_columns(BOOL, "dsgvoConsentGranted"),
        *_columns(DT, "dsgvoDeleteBy"),
        *_columns(STR, "dsgvoDeleteReason"),
        *_columns(BOOL, "newsletterConsent"),
        *_TIMESTAMPS,
    ),
)


TABLES: Final[Mapping[str, TableSchema]] = MappingProxyType(
    {table.name: table for table in (PROPERTIES, CONTACTS)}
)


def get_table(name: str) -> TableSchema:
    """
    Look up a table by name.

    Raises:
        KeyError: If the table is not declared
    """
    try:
        return TABLES[name]
    except KeyError:
        raise KeyError(f"Unknown table: {name}") from None
