"""
Schema Validator - Detect Payload Keys That Are Not Schema Columns

``find_unknown_fields`` is a pure diagnostic. ``require_known_fields`` turns
it into a gate: the record service calls it before every write so that an
unknown key fails the request instead of disappearing in the store.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Any, Final, Mapping

from core.mapping.errors import UnknownFieldError
from core.schema import CONTACTS, PROPERTIES


logger = logging.getLogger(__name__)


PROPERTY_FIELDS: Final[frozenset[str]] = PROPERTIES.column_names
CONTACT_FIELDS: Final[frozenset[str]] = CONTACTS.column_names


def find_unknown_fields(
    payload: Mapping[str, Any],
    valid_fields: AbstractSet[str] = PROPERTY_FIELDS,
) -> list[str]:
    """
    List payload keys that are not valid schema fields.

    Args:
        payload: Any mapping, usually the output of ``map_fields``
        valid_fields: Column names of the target table

    Returns:
        Unknown keys in payload iteration order
    """
    return [key for key in payload if key not in valid_fields]


def require_known_fields(
    payload: Mapping[str, Any],
    valid_fields: AbstractSet[str] = PROPERTY_FIELDS,
    entity: str = "",
) -> None:
    """
    Fail when the payload carries any key outside ``valid_fields``.

    Raises:
        UnknownFieldError: Listing every offending key
    """
    unknown = find_unknown_fields(payload, valid_fields)
    if unknown:
        logger.warning("Rejected %s write with unknown fields: %s", entity or "record", unknown)
        raise UnknownFieldError(unknown, entity=entity)
