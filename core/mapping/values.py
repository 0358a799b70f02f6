"""
Value Normalisation - Frontend Values to Stored Values

Enum columns receive the frontend's German labels (``waermepumpe``, ``A+``)
which the database does not accept; date columns receive ISO strings or
``date`` objects. Values are normalised per column type before a write.

Also defines ``UNSET``, the marker for a field the caller did not provide,
and the create/update filtering rules.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Final, Mapping, Optional

from core.schema import ColumnType, TableSchema


logger = logging.getLogger(__name__)


# =============================================================================
# Unset Marker
# =============================================================================


class _Unset:
    """Marker for a value the caller did not provide."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


# =============================================================================
# Enum Value Tables
# =============================================================================

# Frontend value -> stored value. Stored values map to themselves.
PROPERTY_ENUM_VALUES: Final[dict[str, dict[str, str]]] = {
    "energyCertificateAvailability": {
        "liegt_vor": "available",
        "zur_besichtigung": "available",
        "vorhanden": "available",
        "nicht_vorhanden": "not_available",
        "nicht_benoetigt": "not_required",
        "wird_nicht_benoetigt": "not_required",
        "available": "available",
        "not_available": "not_available",
        "not_required": "not_required",
    },
    "heatingType": {
        "pelletheizung": "fussboden",
        "nachtspeicher": "etagenheizung",
        "blockheizkraftwerk": "zentralheizung",
        "waermepumpe": "zentralheizung",
        "ofen": "ofenheizung",
        "zentralheizung": "zentralheizung",
        "etagenheizung": "etagenheizung",
        "fernwaerme": "fernwaerme",
        "ofenheizung": "ofenheizung",
        "fussboden": "fussboden",
    },
    "energyClass": {
        "a_plus": "a_plus",
        "A+": "a_plus",
        **{letter: letter.lower() for letter in "ABCDEFGH"},
        **{letter: letter for letter in "abcdefgh"},
    },
    "energyCertificateType": {
        "bedarfsausweis": "bedarfsausweis",
        "verbrauchsausweis": "verbrauchsausweis",
    },
    "mainEnergySource": {
        value: value
        for value in ("gas", "oel", "strom", "solar", "erdwaerme", "pellets", "holz", "fernwaerme")
    },
    "condition": {
        value: value
        for value in (
            "first_time_use",
            "first_time_use_after_refurbishment",
            "mint_condition",
            "refurbished",
            "in_need_of_renovation",
            "by_arrangement",
        )
    },
    "assignmentType": {
        value: value
        for value in ("alleinauftrag", "qualifizierter_alleinauftrag", "einfacher_auftrag")
    },
    "assignmentDuration": {
        "unbefristet": "unbefristet",
        "befristet": "befristet",
    },
    "furnishingQuality": {
        value: value for value in ("simple", "normal", "upscale", "luxurious")
    },
    "developmentStatus": {
        value: value
        for value in ("fully_developed", "partially_developed", "undeveloped", "raw_building_land")
    },
}

ISO_DATE_PREFIX: Final = re.compile(r"^\d{4}-\d{2}-\d{2}")
STORED_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Normalisation
# =============================================================================


def normalise_enum(
    column: str,
    value: Any,
    value_table: Optional[Mapping[str, str]],
) -> Optional[str]:
    """
    Map a frontend enum value to its stored value.

    Columns without a value table pass through (stripped). Values missing
    from the table become None so the store never truncates them.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    stripped = value.strip()
    if value_table is None:
        return stripped
    mapped = value_table.get(stripped)
    if mapped is None:
        logger.warning("Unknown enum value for %s: %r - storing NULL", column, stripped)
    return mapped


def normalise_datetime(column: str, value: Any) -> Optional[str]:
    """Convert ISO strings, dates and datetimes to the stored datetime format."""
    if isinstance(value, datetime):
        return value.strftime(STORED_DATETIME_FORMAT)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).strftime(STORED_DATETIME_FORMAT)
    if isinstance(value, str) and ISO_DATE_PREFIX.match(value):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Invalid date for %s: %r - storing NULL", column, value)
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.strftime(STORED_DATETIME_FORMAT)
    logger.warning("Invalid date format for %s: %r - storing NULL", column, value)
    return None


def normalise_values(
    fields: Mapping[str, Any],
    table: TableSchema,
    enum_values: Mapping[str, Mapping[str, str]],
) -> dict[str, Any]:
    """
    Normalise each value according to its column type.

    ``None``, ``UNSET`` and blank strings are left for the create/update
    filters to handle; blank strings are reduced to ``""``.
    """
    normalised: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None or value is UNSET:
            normalised[key] = value
            continue
        if isinstance(value, str) and not value.strip():
            normalised[key] = ""
            continue

        column = table.get(key)
        if column is not None and column.column_type == ColumnType.ENUM:
            normalised[key] = normalise_enum(key, value, enum_values.get(key))
        elif column is not None and column.column_type == ColumnType.DATETIME:
            normalised[key] = normalise_datetime(key, value)
        else:
            normalised[key] = value
    return normalised


# =============================================================================
# Create / Update Filters
# =============================================================================


def filter_for_create(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop unset, None and empty-string values: nothing blank is inserted."""
    return {
        key: value
        for key, value in fields.items()
        if value is not UNSET and value is not None and value != ""
    }


def filter_for_update(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Drop unset values only.

    Explicit None clears the column; an empty string is stored as None.
    """
    filtered: dict[str, Any] = {}
    for key, value in fields.items():
        if value is UNSET:
            continue
        filtered[key] = None if value == "" else value
    return filtered
