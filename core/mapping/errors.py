"""
Write-side error taxonomy.

MappingAmbiguityError is fatal and raised at import time.
ValidationError and UnknownFieldError are request-time and always raised
before any persistence call is made.
"""

from __future__ import annotations

from typing import Iterable


class MappingAmbiguityError(Exception):
    """Raised when a field mapping table has colliding names."""

    def __init__(self, reasons: list[str]):
        self.reasons = reasons
        super().__init__(f"Ambiguous field mapping: {'; '.join(reasons)}")


class ValidationError(ValueError):
    """Raised when a write request cannot be persisted."""

    def __init__(self, errors: Iterable[str], entity: str = ""):
        self.errors = tuple(errors)
        self.entity = entity
        prefix = f"{entity}: " if entity else ""
        super().__init__(prefix + "; ".join(self.errors))

    def to_dict(self) -> dict:
        return {
            "error": "validation_error",
            "entity": self.entity,
            "errors": list(self.errors),
        }


class UnknownFieldError(ValidationError):
    """Raised when a payload carries keys that are not schema columns."""

    def __init__(self, fields: Iterable[str], entity: str = ""):
        self.fields = tuple(fields)
        super().__init__(
            [f"Unknown field(s): {', '.join(self.fields)}"],
            entity=entity,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["error"] = "unknown_fields"
        data["fields"] = list(self.fields)
        return data
