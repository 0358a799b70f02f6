"""
File Store Gateway - Property and Contact Documents on the NAS

Resolves remote paths for property and contact documents and performs the
remote operations through an injected transport factory.

Every operation opens a fresh transport session and closes it on every exit
path. Failures always surface as ``StorageError`` subclasses carrying the
operation name and the remote path; raw provider exceptions never leak.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Callable, Final, Iterator, Optional

from core.storage.errors import StorageError, StorageNotFoundError, UnknownStorageError
from core.storage.ftp import FTPTransport
from core.storage.paths import (
    ContactInfo,
    ContactModule,
    PropertyAddress,
    PropertyCategory,
    all_category_paths,
    category_path,
    contact_folder_path,
    property_path,
)
from core.storage.transport import StorageTransport
from core.storage.webdav import WebDAVTransport


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_CONTACT_BASE_PATH: Final[str] = "/Daten/Allianz/Agentur Jaeger"

TransportFactory = Callable[[], StorageTransport]


def sanitise_file_name(file_name: str) -> str:
    """Reduce a client supplied file name to a single path segment."""
    safe = file_name.replace("/", "_").replace("\\", "_").strip()
    if safe in ("", ".", ".."):
        safe = "document"
    return safe


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class FileDescriptor:
    """A file stored in a category folder."""

    path: str
    name: str
    size: int
    content_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "size": self.size,
            "content_type": self.content_type,
        }


class _PathLock:
    """Lock for one remote path and the number of callers holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


# =============================================================================
# Gateway
# =============================================================================


class FileStoreGateway:
    """
    Remote file operations for property and contact documents.

    Args:
        transport_factory: Opens a new transport session per call
        base_path: Remote root for property folders
        contact_base_path: Remote root for contact document folders
        create_all_categories: On upload, create every category folder of the
            property rather than only the target one
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        base_path: str,
        contact_base_path: str = DEFAULT_CONTACT_BASE_PATH,
        create_all_categories: bool = True,
    ):
        self._transport_factory = transport_factory
        self._base_path = base_path
        self._contact_base_path = contact_base_path
        self._create_all_categories = create_all_categories

        self._path_locks: dict[str, _PathLock] = {}
        self._path_locks_guard = threading.Lock()

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def contact_base_path(self) -> str:
        return self._contact_base_path

    @contextmanager
    def _path_lock(self, remote_path: str) -> Iterator[None]:
        """Serialise writes to one remote path. Entries are dropped when unused."""
        with self._path_locks_guard:
            entry = self._path_locks.get(remote_path)
            if entry is None:
                entry = self._path_locks[remote_path] = _PathLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._path_locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._path_locks[remote_path]

    @contextmanager
    def _session(self, operation: str, path: str) -> Iterator[StorageTransport]:
        """Open a transport for one operation and translate failures."""
        try:
            transport = self._transport_factory()
        except StorageError as e:
            _annotate(e, operation, path)
            raise
        except Exception as e:
            raise UnknownStorageError(
                f"Could not open storage session: {type(e).__name__}", path, operation
            ) from e

        try:
            yield transport
        except StorageError as e:
            _annotate(e, operation, path)
            raise
        except Exception as e:
            logger.exception("Unexpected error during %s of %s", operation, path)
            raise UnknownStorageError(
                f"{operation} failed: {type(e).__name__}", path, operation
            ) from e
        finally:
            transport.close()

    @staticmethod
    def _ensure(transport: StorageTransport, path: str) -> None:
        if not transport.exists(path):
            transport.make_directory(path, recursive=True)

    # =========================================================================
    # Directories
    # =========================================================================

    def ensure_directory(self, path: str) -> None:
        """Create path and any missing ancestors. No-op if present."""
        with self._session("ensure_directory", path) as transport:
            self._ensure(transport, path)

    def ensure_property_folders(self, address: PropertyAddress) -> str:
        """
        Create the property folder and all four category folders.

        Returns:
            The property folder path
        """
        root = property_path(self._base_path, address)
        with self._session("ensure_property_folders", root) as transport:
            self._ensure(transport, root)
            for path in all_category_paths(self._base_path, address):
                self._ensure(transport, path)
        return root

    # =========================================================================
    # Files
    # =========================================================================

    def upload(
        self,
        address: PropertyAddress,
        category: PropertyCategory | str,
        file_name: str,
        content: bytes,
    ) -> str:
        """
        Upload a property document, overwriting an existing file of the same name.

        Args:
            address: Property address (determines the folder)
            category: One of the four category labels
            file_name: Target file name
            content: File content

        Returns:
            Full remote path written

        Raises:
            InvalidCategoryError: If category is not a known label (before any I/O)
            StorageError: On any remote failure
        """
        directory = category_path(self._base_path, address, category)
        remote_path = posixpath.join(directory, sanitise_file_name(file_name))

        if self._create_all_categories:
            folders = [property_path(self._base_path, address)]
            folders += all_category_paths(self._base_path, address)
        else:
            folders = [directory]

        with self._path_lock(remote_path):
            with self._session("upload", remote_path) as transport:
                for folder in folders:
                    self._ensure(transport, folder)
                transport.put_file(remote_path, content)

        logger.info("Uploaded %s (%d bytes)", remote_path, len(content))
        return remote_path

    def upload_contact_document(
        self,
        module: ContactModule | str,
        contact: ContactInfo,
        file_name: str,
        content: bytes,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
    ) -> str:
        """
        Upload a document into a contact's module folder.

        Returns:
            Full remote path written
        """
        directory = contact_folder_path(
            self._contact_base_path, module, contact, category, subcategory
        )
        remote_path = posixpath.join(directory, sanitise_file_name(file_name))

        with self._path_lock(remote_path):
            with self._session("upload_contact_document", remote_path) as transport:
                self._ensure(transport, directory)
                transport.put_file(remote_path, content)

        logger.info("Uploaded contact document %s (%d bytes)", remote_path, len(content))
        return remote_path

    def delete(self, remote_path: str) -> None:
        """
        Delete a single file.

        Raises:
            StorageNotFoundError: If the file does not exist
        """
        with self._path_lock(remote_path):
            with self._session("delete", remote_path) as transport:
                transport.delete_file(remote_path)
        logger.info("Deleted %s", remote_path)

    def list_files(
        self,
        address: PropertyAddress,
        category: PropertyCategory | str,
    ) -> list[FileDescriptor]:
        """
        List the files of a property category.

        Returns an empty list when the category folder does not exist.
        Directories are excluded.
        """
        directory = category_path(self._base_path, address, category)
        return self._list_folder("list", directory)

    def list_contact_documents(
        self,
        module: ContactModule | str,
        contact: ContactInfo,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
    ) -> list[FileDescriptor]:
        """
        List the files in a contact's module folder.

        Returns an empty list when the folder does not exist.
        """
        directory = contact_folder_path(
            self._contact_base_path, module, contact, category, subcategory
        )
        return self._list_folder("list_contact_documents", directory)

    def _list_folder(self, operation: str, directory: str) -> list[FileDescriptor]:
        with self._session(operation, directory) as transport:
            try:
                entries = transport.list_directory(directory)
            except StorageNotFoundError:
                logger.debug("Folder does not exist: %s", directory)
                return []

        return [
            FileDescriptor(
                path=entry.path,
                name=entry.name,
                size=entry.size,
                content_type=entry.content_type,
            )
            for entry in entries
            if not entry.is_directory
        ]

    def download(self, remote_path: str) -> bytes:
        """Read a file's content."""
        with self._session("download", remote_path) as transport:
            return transport.get_file(remote_path)

    def test_connection(self) -> bool:
        """Check that the storage backend is reachable with the configured credentials."""
        try:
            with self._session("test_connection", self._base_path) as transport:
                transport.exists("/")
        except StorageError as e:
            logger.warning("Storage connection test failed: %s", e)
            return False
        return True


def _annotate(error: StorageError, operation: str, path: str) -> None:
    if error.operation is None:
        error.operation = operation
    if error.path is None:
        error.path = path


# =============================================================================
# Factory
# =============================================================================


def build_gateway(config) -> FileStoreGateway:
    """
    Build a gateway for the backend selected in configuration.

    Args:
        config: Application ``Config``

    Raises:
        ValueError: If the configured backend is unknown
    """
    backend = config.storage_backend.lower()

    if backend == "webdav":
        factory = partial(
            WebDAVTransport,
            config.webdav_url,
            config.webdav_username,
            config.webdav_password,
            timeout=config.storage_timeout,
        )
    elif backend == "ftp":
        factory = partial(
            FTPTransport,
            config.ftp_host,
            config.ftp_port,
            config.ftp_username,
            config.ftp_password,
            secure=config.ftp_secure,
            timeout=config.storage_timeout,
        )
    else:
        raise ValueError(f"Unknown storage backend: {config.storage_backend!r}")

    logger.info("Storage backend: %s (base path %s)", backend, config.storage_base_path)
    return FileStoreGateway(
        factory,
        base_path=config.storage_base_path,
        contact_base_path=config.contact_base_path,
        create_all_categories=config.create_all_categories,
    )
