"""
Reporting module for Makler CRM.

Schema drift reports comparing client request field names with the
persisted table columns.

Usage:
    from core.mapping import PROPERTY
    from reporting import analyse_drift, format_report

    report = analyse_drift(PROPERTY, ["title", "price", "heatingKind"])
    print(format_report(report))
"""

from .schema_report import DriftReport, analyse_drift, format_report, format_schema

__all__ = [
    "DriftReport",
    "analyse_drift",
    "format_report",
    "format_schema",
]
