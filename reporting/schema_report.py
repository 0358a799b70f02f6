"""
Schema Drift Report - Request Fields vs. Persisted Columns

Compares the field names a client sends against the authoritative table
schema, after applying the entity's field mapping. Fields that would be
rejected as unknown are drift; writable columns that no request field
reaches are reported for information.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.mapping import EntityDefinition, find_unknown_fields, map_fields


@dataclass(frozen=True)
class DriftReport:
    """Result of comparing request field names with a table schema."""

    entity: str
    request_fields: tuple[str, ...]
    renamed: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    unknown: tuple[str, ...] = field(default_factory=tuple)
    unreached_columns: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_drift(self) -> bool:
        return bool(self.unknown)

    def to_dict(self) -> dict:
        return {
            "entity": self.entity,
            "request_fields": list(self.request_fields),
            "renamed": [list(pair) for pair in self.renamed],
            "unknown": list(self.unknown),
            "unreached_columns": list(self.unreached_columns),
            "has_drift": self.has_drift,
        }


def analyse_drift(entity: EntityDefinition, request_fields: Iterable[str]) -> DriftReport:
    """
    Check request field names against an entity's schema.

    Args:
        entity: Entity definition (table and mapping)
        request_fields: Field names as a client sends them

    Returns:
        DriftReport
    """
    names = tuple(sorted(set(request_fields)))
    mapped = map_fields({name: None for name in names}, entity.mapping)

    renamed = tuple(
        (external, internal)
        for external, internal in entity.mapping
        if external in names
    )
    unknown = tuple(find_unknown_fields(mapped, entity.valid_fields))
    unreached = tuple(sorted(entity.table.writable_columns - set(mapped)))

    return DriftReport(
        entity=entity.name,
        request_fields=names,
        renamed=renamed,
        unknown=unknown,
        unreached_columns=unreached,
    )


def format_schema(entity: EntityDefinition) -> str:
    """Human-readable listing of an entity's columns and field mapping."""
    table = entity.table
    lines = [
        f"{entity.name} -> table '{table.name}' ({len(table.columns)} columns)",
        "",
    ]
    for column in table.columns:
        flags = []
        if not column.nullable:
            flags.append("NOT NULL")
        if column.read_only:
            flags.append("read-only")
        if column.default is not None:
            flags.append(f"default={column.default!r}")
        suffix = f"  [{', '.join(flags)}]" if flags else ""
        lines.append(f"  {column.name:<40} {column.column_type.value}{suffix}")

    if len(entity.mapping):
        lines += ["", "Request field mapping:"]
        lines += [f"  {external} -> {internal}" for external, internal in entity.mapping]

    return "\n".join(lines)


def format_report(report: DriftReport) -> str:
    """Human-readable drift report."""
    lines = [
        f"=== FIELD DRIFT ANALYSIS: {report.entity} ===",
        f"Request fields checked: {len(report.request_fields)}",
    ]

    if report.renamed:
        lines.append("")
        lines.append("Renamed before persistence:")
        lines += [f"  {external} -> {internal}" for external, internal in report.renamed]

    lines.append("")
    if report.unknown:
        lines.append(f"Unknown fields (would be rejected): {len(report.unknown)}")
        lines += [f"  {name}" for name in report.unknown]
    else:
        lines.append("Unknown fields: none")

    if report.unreached_columns:
        lines.append("")
        lines.append(f"Writable columns not sent: {len(report.unreached_columns)}")
        lines.append("  " + ", ".join(report.unreached_columns))

    return "\n".join(lines)
