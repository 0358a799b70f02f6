"""
Property Path Resolver - Remote Folder Layout

Pure string formatting of remote storage paths. The folder name derived from
a property address is the shared key every upload, listing and delete uses,
so it must be deterministic for identical input.

Layout:
    {base}/{street} {houseNumber}, {zipCode} {city}/{category}/{file}
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping, Optional


# =============================================================================
# Constants
# =============================================================================

UNKNOWN_STREET: Final[str] = "Unbekannte Straße"
UNKNOWN_CITY: Final[str] = "Unbekannte Stadt"

VOLUME_PREFIX: Final[str] = "/volume1"


class InvalidCategoryError(ValueError):
    """Raised when a category label is not one of the fixed folder labels."""

    def __init__(self, category: Any):
        self.category = category
        allowed = ", ".join(c.value for c in PropertyCategory)
        super().__init__(f"Invalid category {category!r}. Allowed: {allowed}")


class PropertyCategory(Enum):
    """Fixed folder labels under each property folder (case-sensitive)."""

    IMAGES = "Bilder"
    PROPERTY_DOCUMENTS = "Objektunterlagen"
    SENSITIVE_DATA = "Sensible Daten"
    CONTRACTS = "Vertragsunterlagen"

    @classmethod
    def parse(cls, value: "PropertyCategory | str") -> "PropertyCategory":
        """
        Resolve a category from its label.

        Raises:
            InvalidCategoryError: If value is not one of the four labels
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategoryError(value) from None


class ContactModule(Enum):
    """Business modules that keep per-contact document folders."""

    REAL_ESTATE = "immobilienmakler"
    INSURANCE = "versicherungen"
    PROPERTY_MANAGEMENT = "hausverwaltung"


# =============================================================================
# Addresses
# =============================================================================


@dataclass(frozen=True)
class PropertyAddress:
    """Address fields that determine a property's remote folder."""

    street: Optional[str] = None
    house_number: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PropertyAddress":
        """Build from a stored property row (schema column names)."""

        def text(key: str) -> Optional[str]:
            value = record.get(key)
            return None if value is None else str(value)

        return cls(
            street=text("street"),
            house_number=text("houseNumber"),
            zip_code=text("zipCode"),
            city=text("city"),
        )


@dataclass(frozen=True)
class ContactInfo:
    """Contact fields used to name per-contact document folders."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    street: Optional[str] = None
    house_number: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ContactInfo":
        return cls(
            first_name=record.get("firstName"),
            last_name=record.get("lastName"),
            street=record.get("street"),
            house_number=record.get("houseNumber"),
            city=record.get("city"),
        )

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


# =============================================================================
# Path Formatting
# =============================================================================


def _or(value: Optional[str], fallback: str) -> str:
    if value is None or not value.strip():
        return fallback
    return value.strip()


def folder_name(address: PropertyAddress) -> str:
    """
    Derive the property folder name.

    Missing street and city fall back to fixed literals; missing house
    number and zip code are left empty. Values are trimmed but keep their
    inner whitespace; only the separator after a missing zip code is
    dropped, so an all-empty address gives ``"Unbekannte Straße , Unbekannte Stadt"``.
    """
    street = _or(address.street, UNKNOWN_STREET)
    house_number = _or(address.house_number, "")
    zip_code = _or(address.zip_code, "")
    city = _or(address.city, UNKNOWN_CITY)

    locality = f"{zip_code} {city}" if zip_code else city
    return f"{street} {house_number}, {locality}"


def _join(base_path: str, *parts: str) -> str:
    base = base_path.rstrip("/") or "/"
    return posixpath.join(base, *parts)


def property_path(base_path: str, address: PropertyAddress) -> str:
    """Remote folder for a property."""
    return _join(base_path, folder_name(address))


def category_path(
    base_path: str,
    address: PropertyAddress,
    category: PropertyCategory | str,
) -> str:
    """
    Remote folder for one category of a property.

    Raises:
        InvalidCategoryError: If category is not one of the fixed labels
    """
    resolved = PropertyCategory.parse(category)
    return _join(base_path, folder_name(address), resolved.value)


def all_category_paths(base_path: str, address: PropertyAddress) -> list[str]:
    """Remote folders of every category of a property, in declaration order."""
    return [category_path(base_path, address, category) for category in PropertyCategory]


def contact_folder_path(
    base_path: str,
    module: ContactModule | str,
    contact: ContactInfo,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> str:
    """
    Remote folder for a contact's documents in a business module.

    Property management contacts are filed by address when street, house
    number and city are all known, otherwise by name like the other modules.
    """
    module = ContactModule(module)
    name = contact.display_name

    if module is ContactModule.REAL_ESTATE:
        path = _join(base_path, "Beratung", "Immobilienmakler", "Kontakte", name)
    elif module is ContactModule.INSURANCE:
        path = _join(base_path, "Versicherungen", name)
    else:
        if contact.street and contact.house_number and contact.city:
            folder = f"{contact.street} {contact.house_number}, {contact.city}"
        else:
            folder = name
        path = _join(base_path, "Hausverwaltung", folder)

    if category:
        path = posixpath.join(path, category)
    if subcategory:
        path = posixpath.join(path, subcategory)
    return path


def public_file_url(public_domain: str, remote_path: str) -> str:
    """Public URL of a remote file, without the NAS volume prefix."""
    clean = remote_path.replace(VOLUME_PREFIX, "", 1)
    return f"{public_domain.rstrip('/')}{clean}"
