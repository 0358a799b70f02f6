"""
Makler CRM - Remote Document Storage

Folder layout for property and contact documents on the office NAS and the
gateway performing uploads, listings and deletes over WebDAV or FTP.
"""

from core.storage.errors import (
    StorageErrorKind,
    StorageError,
    StorageConnectionError,
    StorageAuthError,
    StorageNotFoundError,
    StorageTimeoutError,
    UnknownStorageError,
)
from core.storage.paths import (
    InvalidCategoryError,
    PropertyCategory,
    ContactModule,
    PropertyAddress,
    ContactInfo,
    folder_name,
    property_path,
    category_path,
    all_category_paths,
    contact_folder_path,
    public_file_url,
)
from core.storage.transport import RemoteEntry, StorageTransport
from core.storage.webdav import WebDAVTransport
from core.storage.ftp import FTPTransport
from core.storage.gateway import (
    FileDescriptor,
    FileStoreGateway,
    build_gateway,
    sanitise_file_name,
)

__all__ = [
    # Errors
    "StorageErrorKind",
    "StorageError",
    "StorageConnectionError",
    "StorageAuthError",
    "StorageNotFoundError",
    "StorageTimeoutError",
    "UnknownStorageError",
    # Paths
    "InvalidCategoryError",
    "PropertyCategory",
    "ContactModule",
    "PropertyAddress",
    "ContactInfo",
    "folder_name",
    "property_path",
    "category_path",
    "all_category_paths",
    "contact_folder_path",
    "public_file_url",
    # Transports
    "RemoteEntry",
    "StorageTransport",
    "WebDAVTransport",
    "FTPTransport",
    # Gateway
    "FileDescriptor",
    "FileStoreGateway",
    "build_gateway",
    "sanitise_file_name",
]
