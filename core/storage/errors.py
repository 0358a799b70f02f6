"""
Storage Errors - Normalised Remote Storage Failures

Every transport translates its provider-specific failures into one of these
before they reach callers. Callers branch on ``kind``, never on provider
codes or message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class StorageErrorKind(Enum):
    """Normalised remote storage failure kinds."""

    CONNECTION = "connection"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class StorageError(Exception):
    """
    Base class for remote storage failures.

    Attributes:
        operation: Gateway operation that failed (upload, delete, list, ...)
        path: Remote path involved, if any
        message: Human-readable description
    """

    kind: StorageErrorKind = StorageErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        self.message = message
        self.path = path
        self.operation = operation
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.path:
            parts.append(f"path={self.path}")
        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Serialisable description for API responses."""
        return {
            "kind": self.kind.value,
            "operation": self.operation,
            "path": self.path,
            "message": self.message,
        }


class StorageConnectionError(StorageError):
    """Server unreachable or connection refused."""

    kind = StorageErrorKind.CONNECTION


class StorageAuthError(StorageError):
    """Credentials rejected."""

    kind = StorageErrorKind.AUTH


class StorageNotFoundError(StorageError):
    """Remote path does not exist."""

    kind = StorageErrorKind.NOT_FOUND


class StorageTimeoutError(StorageError):
    """Remote call exceeded the configured timeout."""

    kind = StorageErrorKind.TIMEOUT


class UnknownStorageError(StorageError):
    """Any other provider failure."""

    kind = StorageErrorKind.UNKNOWN
