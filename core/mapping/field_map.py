"""
Field Mapping - Request Field Names to Schema Column Names

Client-facing write requests use friendly field names (``price``,
``coldRent``) while the properties table stores them under different column
names (``purchasePrice``, ``baseRent``). A request key that is not translated
reaches the store under a name it does not know and its value is lost.

The mapping is a set of disjoint (external, internal) pairs: no external name
is also an internal name, so the order in which pairs are applied never
changes the result. This is checked when the table is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Iterator, Mapping

from core.mapping.errors import MappingAmbiguityError


# =============================================================================
# Field Mapping Table
# =============================================================================


@dataclass(frozen=True)
class FieldMapping:
    """
    Immutable bidirectional field name dictionary.

    Invariants:
        - external names are unique
        - internal names are unique
        - no external name is also an internal name (no chained translation)
    """

    pairs: tuple[tuple[str, str], ...]
    _forward: Mapping[str, str] = field(init=False, repr=False, compare=False)
    _reverse: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        reasons = check_disjoint(self.pairs)
        if reasons:
            raise MappingAmbiguityError(reasons)
        object.__setattr__(self, "_forward", MappingProxyType(dict(self.pairs)))
        object.__setattr__(
            self, "_reverse", MappingProxyType({i: e for e, i in self.pairs})
        )

    @property
    def external_names(self) -> frozenset[str]:
        return frozenset(self._forward)

    @property
    def internal_names(self) -> frozenset[str]:
        return frozenset(self._reverse)

    def to_internal(self, name: str) -> str:
        """Translate one field name; unmapped names are returned unchanged."""
        return self._forward.get(name, name)

    def to_external(self, name: str) -> str:
        return self._reverse.get(name, name)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __contains__(self, name: object) -> bool:
        return name in self._forward


def check_disjoint(pairs: tuple[tuple[str, str], ...]) -> list[str]:
    """
    Check a pair list for collisions.

    Returns:
        List of human-readable problems (empty when the table is sound)
    """
    reasons: list[str] = []
    seen_external: set[str] = set()
    seen_internal: set[str] = set()

    for external, internal in pairs:
        if external in seen_external:
            reasons.append(f"duplicate external name {external!r}")
        if internal in seen_internal:
            reasons.append(f"internal name {internal!r} targeted twice")
        if external == internal:
            reasons.append(f"{external!r} maps to itself")
        seen_external.add(external)
        seen_internal.add(internal)

    chained = sorted(seen_external & seen_internal)
    for name in chained:
        reasons.append(f"{name!r} is both an external and an internal name")

    return reasons


# Router field -> properties column. Must stay in sync with stored data and
# existing clients.
PROPERTY_FIELD_PAIRS: Final[tuple[tuple[str, str], ...]] = (
    # Price
    ("price", "purchasePrice"),
    ("coldRent", "baseRent"),
    ("warmRent", "totalRent"),
    # Areas
    ("balconyArea", "balconyTerraceArea"),
    # Parking
    ("parkingCount", "parkingSpaces"),
    # Features
    ("flooringTypes", "flooring"),
    ("heatingIncludedInAdditional", "heatingCostsInServiceCharge"),
    # Investment
    ("monthlyRentalIncome", "rentalIncome"),
)

PROPERTY_MAPPING: Final[FieldMapping] = FieldMapping(PROPERTY_FIELD_PAIRS)

# The contact router already uses column names.
CONTACT_MAPPING: Final[FieldMapping] = FieldMapping(())


# =============================================================================
# Field Mapper
# =============================================================================


def map_fields(
    payload: Mapping[str, Any],
    mapping: FieldMapping = PROPERTY_MAPPING,
) -> dict[str, Any]:
    """
    Rename every mapped external key to its schema column name.

    Values are copied untouched (no coercion, no null handling). Keys that
    are not external names pass through unchanged. The input is not
    modified.

    Args:
        payload: Request payload
        mapping: Field mapping table to apply

    Returns:
        New dict keyed by schema names
    """
    mapped = dict(payload)
    for external, internal in mapping:
        if external in mapped:
            mapped[internal] = mapped.pop(external)
    return mapped
