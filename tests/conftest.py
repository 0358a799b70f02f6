"""
Shared fixtures: in-memory remote storage and record store.
"""

from __future__ import annotations

import posixpath
import tempfile
import threading
from pathlib import Path

import pytest

from core.records import InMemoryRecordStore, reset_record_store
from core.storage import FileStoreGateway, RemoteEntry, StorageNotFoundError


BASE_PATH = "/volume1/Daten/Allianz/Agentur Jaeger/Beratung/Immobilienmakler/Verkauf"
CONTACT_BASE_PATH = "/Daten/Allianz/Agentur Jaeger"


# =============================================================================
# Fake Remote Storage
# =============================================================================


def _norm(path: str) -> str:
    return "/" + path.strip("/") if path.strip("/") else "/"


class FakeRemote:
    """Remote file system shared by all sessions opened on it."""

    def __init__(self):
        self.directories: set[str] = {"/"}
        self.files: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, BaseException] = {}
        self.connect_error: BaseException | None = None
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.lock = threading.Lock()

    def connect(self) -> "FakeTransport":
        if self.connect_error is not None:
            raise self.connect_error
        with self.lock:
            self.sessions_opened += 1
        return FakeTransport(self)

    def calls_of(self, operation: str) -> list[str]:
        return [path for op, path in self.calls if op == operation]


class FakeTransport:
    """Storage transport over a FakeRemote."""

    def __init__(self, remote: FakeRemote):
        self.remote = remote

    def _record(self, operation: str, path: str) -> str:
        self.remote.calls.append((operation, path))
        failure = self.remote.failures.get(operation)
        if failure is not None:
            raise failure
        return _norm(path)

    def exists(self, path: str) -> bool:
        path = self._record("exists", path)
        return path in self.remote.directories or path in self.remote.files

    def make_directory(self, path: str, recursive: bool = True) -> None:
        path = self._record("make_directory", path)
        while path != "/":
            self.remote.directories.add(path)
            path = posixpath.dirname(path)

    def put_file(self, path: str, content: bytes) -> None:
        path = self._record("put_file", path)
        if posixpath.dirname(path) not in self.remote.directories:
            raise StorageNotFoundError("Parent directory missing", path)
        self.remote.files[path] = content

    def get_file(self, path: str) -> bytes:
        path = self._record("get_file", path)
        if path not in self.remote.files:
            raise StorageNotFoundError("File not found", path)
        return self.remote.files[path]

    def delete_file(self, path: str) -> None:
        path = self._record("delete_file", path)
        if path not in self.remote.files:
            raise StorageNotFoundError("File not found", path)
        del self.remote.files[path]

    def list_directory(self, path: str) -> list[RemoteEntry]:
        path = self._record("list_directory", path)
        if path not in self.remote.directories:
            raise StorageNotFoundError("Directory not found", path)

        entries = [
            RemoteEntry(name=posixpath.basename(d), path=d, is_directory=True)
            for d in sorted(self.remote.directories)
            if d != "/" and posixpath.dirname(d) == path
        ]
        entries += [
            RemoteEntry(name=posixpath.basename(f), path=f, is_directory=False, size=len(data))
            for f, data in sorted(self.remote.files.items())
            if posixpath.dirname(f) == path
        ]
        return entries

    def close(self) -> None:
        with self.remote.lock:
            self.remote.sessions_closed += 1


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def remote():
    """Empty fake remote storage."""
    return FakeRemote()


@pytest.fixture
def gateway(remote):
    """Gateway over the fake remote with the WebDAV base path."""
    return FileStoreGateway(
        remote.connect,
        base_path=BASE_PATH,
        contact_base_path=CONTACT_BASE_PATH,
    )


@pytest.fixture
def temp_persist_path():
    """Create a temporary file path for persistence."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield str(Path(tmpdir) / "records.json")


@pytest.fixture
def store(temp_persist_path):
    """Fresh record store for each test."""
    reset_record_store()
    return InMemoryRecordStore(persist_path=temp_persist_path)
