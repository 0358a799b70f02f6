#!/usr/bin/env python3
"""
CLI for checking request field names against the persisted schema.

Usage:
    python -m reporting.cli schema [--entity property|contact]
    python -m reporting.cli check [--entity property|contact] (--fields a,b,c | --payload file.json)

Examples:
    # List property columns and the request field mapping
    python -m reporting.cli schema

    # Check the fields a client form sends
    python -m reporting.cli check --fields title,price,coldRent,heatingKind

    # Check the keys of a captured request body
    python -m reporting.cli check --entity contact --payload contact_request.json

Exit status of ``check`` is 1 when unknown fields are found.
"""

import argparse
import json
import sys
from pathlib import Path

from core.mapping import EntityKind, get_entity

from .schema_report import analyse_drift, format_report, format_schema


def load_field_names(path: Path) -> list:
    """
    Read field names from a JSON file.

    Accepts either a list of names or a request body object (optionally
    wrapped in ``{"data": {...}}``), in which case its keys are used.
    """
    with open(path, "r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        body = data.get("data", data)
        if not isinstance(body, dict):
            raise ValueError("'data' must be an object")
        return list(body.keys())
    if isinstance(data, list) and all(isinstance(name, str) for name in data):
        return data
    raise ValueError("Expected a JSON object or a list of field names")


def cmd_schema(args):
    """Print the columns of an entity's table."""
    print(format_schema(get_entity(args.entity)))
    return 0


def cmd_check(args):
    """Report request fields that would be rejected as unknown."""
    if args.payload:
        input_path = Path(args.payload)
        if not input_path.exists():
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            return 2
        try:
            names = load_field_names(input_path)
        except json.JSONDecodeError as e:
            print(f"Error: Invalid JSON: {e}", file=sys.stderr)
            return 2
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
    else:
        names = [name.strip() for name in args.fields.split(",") if name.strip()]

    report = analyse_drift(get_entity(args.entity), names)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report))

    return 1 if report.has_drift else 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Makler CRM - Schema Field Drift Report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli schema --entity contact
    python -m reporting.cli check --fields title,price,coldRent
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    entity_choices = [kind.value for kind in EntityKind]

    # Schema command
    schema_parser = subparsers.add_parser(
        "schema",
        help="List table columns and request field mapping",
    )
    schema_parser.add_argument("--entity", choices=entity_choices, default="property")
    schema_parser.set_defaults(func=cmd_schema)

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check request field names against the schema",
    )
    check_parser.add_argument("--entity", choices=entity_choices, default="property")
    source = check_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--fields", help="Comma-separated request field names")
    source.add_argument("--payload", help="JSON file with field names or a request body")
    check_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    check_parser.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
