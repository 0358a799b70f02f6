"""
Storage Transport - Backend-Neutral Directory and File Primitives

The File Store Gateway talks to remote storage only through this interface.
WebDAV and FTP implementations live in their own modules; tests use an
in-memory fake.

Implementations must raise ``StorageError`` subclasses for every failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class RemoteEntry:
    """One entry of a remote directory listing."""

    name: str
    path: str
    is_directory: bool
    size: int = 0
    content_type: Optional[str] = None


class StorageTransport(Protocol):
    """A single remote storage session."""

    def exists(self, path: str) -> bool:
        ...

    def make_directory(self, path: str, recursive: bool = True) -> None:
        """Create a directory (and missing ancestors when recursive)."""
        ...

    def put_file(self, path: str, content: bytes) -> None:
        """Write a file, overwriting any existing file at path."""
        ...

    def get_file(self, path: str) -> bytes:
        ...

    def delete_file(self, path: str) -> None:
        ...

    def list_directory(self, path: str) -> list[RemoteEntry]:
        """Entries directly inside path. Raises StorageNotFoundError if absent."""
        ...

    def close(self) -> None:
        ...
