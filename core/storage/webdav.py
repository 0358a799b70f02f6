"""
WebDAV Transport - NAS Access over HTTP

Implements the storage transport with plain HTTP verbs on a
``requests.Session``: PROPFIND for existence and listings, MKCOL for
directories, PUT/GET/DELETE for files. Every request carries an explicit
timeout and every failure is translated into the storage error taxonomy.
"""

from __future__ import annotations

import logging
import posixpath
import xml.etree.ElementTree as ET
from typing import Final, Optional
from urllib.parse import quote, unquote, urlparse

import requests

from core.storage.errors import (
    StorageAuthError,
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StorageTimeoutError,
    UnknownStorageError,
)
from core.storage.transport import RemoteEntry


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0

DAV_NAMESPACE: Final[str] = "DAV:"

PROPFIND_BODY: Final[str] = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<d:propfind xmlns:d="DAV:"><d:prop>'
    "<d:resourcetype/><d:getcontentlength/><d:getcontenttype/>"
    "</d:prop></d:propfind>"
)


def _dav(tag: str) -> str:
    return f"{{{DAV_NAMESPACE}}}{tag}"


def translate_status(status_code: int, path: str, reason: str = "") -> Optional[StorageError]:
    """Map an HTTP error status to a storage error (None for success codes)."""
    if status_code < 400:
        return None
    detail = f"HTTP {status_code} {reason}".strip()
    if status_code in (401, 403):
        return StorageAuthError(f"Credentials rejected by WebDAV server ({detail})", path)
    if status_code == 404:
        return StorageNotFoundError(f"Remote path not found ({detail})", path)
    if status_code in (408, 504):
        return StorageTimeoutError(f"WebDAV server timed out ({detail})", path)
    return UnknownStorageError(f"WebDAV request failed ({detail})", path)


# =============================================================================
# Transport
# =============================================================================


class WebDAVTransport:
    """
    One WebDAV session.

    Args:
        base_url: Server URL, e.g. ``https://nas.example.de:5006``
        username: Basic auth user
        password: Basic auth password
        timeout: Seconds per request
        session: Optional pre-built session (tests)
    """

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise StorageConnectionError("WebDAV URL is not configured")

        self._base_url = base_url.rstrip("/")
        self._prefix = urlparse(self._base_url).path.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        if username:
            self._session.auth = (username, password)

    def _url(self, path: str) -> str:
        return self._base_url + quote("/" + path.lstrip("/"))

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self._session.request(
                method, self._url(path), timeout=self._timeout, **kwargs
            )
        except requests.Timeout as e:
            raise StorageTimeoutError(
                f"WebDAV server did not answer within {self._timeout}s", path
            ) from e
        except requests.ConnectionError as e:
            raise StorageConnectionError(f"WebDAV server unreachable: {self._base_url}", path) from e
        except requests.RequestException as e:
            raise UnknownStorageError(f"WebDAV request failed: {type(e).__name__}", path) from e

    def _raise_for_status(self, response: requests.Response, path: str) -> None:
        error = translate_status(response.status_code, path, response.reason or "")
        if error is not None:
            raise error

    def _propfind(self, path: str, depth: int) -> requests.Response:
        return self._request(
            "PROPFIND",
            path,
            data=PROPFIND_BODY,
            headers={"Depth": str(depth), "Content-Type": "application/xml; charset=utf-8"},
        )

    # =========================================================================
    # Transport Operations
    # =========================================================================

    def exists(self, path: str) -> bool:
        response = self._propfind(path, depth=0)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, path)
        return True

    def make_directory(self, path: str, recursive: bool = True) -> None:
        if not recursive:
            self._mkcol(path)
            return

        current = ""
        for part in [p for p in path.split("/") if p]:
            current = f"{current}/{part}"
            if not self.exists(current):
                self._mkcol(current)

    def _mkcol(self, path: str) -> None:
        response = self._request("MKCOL", path)
        # 405: collection already exists
        if response.status_code == 405:
            return
        self._raise_for_status(response, path)
        logger.info("Created directory: %s", path)

    def put_file(self, path: str, content: bytes) -> None:
        response = self._request("PUT", path, data=content)
        self._raise_for_status(response, path)

    def get_file(self, path: str) -> bytes:
        response = self._request("GET", path)
        self._raise_for_status(response, path)
        return response.content

    def delete_file(self, path: str) -> None:
        response = self._request("DELETE", path)
        self._raise_for_status(response, path)

    def list_directory(self, path: str) -> list[RemoteEntry]:
        response = self._propfind(path, depth=1)
        self._raise_for_status(response, path)
        return self._parse_listing(response.content, path)

    def close(self) -> None:
        self._session.close()

    # =========================================================================
    # Parsing
    # =========================================================================

    def _href_to_path(self, href: str) -> str:
        href_path = unquote(urlparse(href).path)
        if self._prefix and href_path.startswith(self._prefix):
            href_path = href_path[len(self._prefix):]
        return href_path.rstrip("/") or "/"

    def _parse_listing(self, body: bytes, directory: str) -> list[RemoteEntry]:
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise UnknownStorageError("Malformed PROPFIND response", directory) from e

        own_path = "/" + directory.strip("/")
        entries: list[RemoteEntry] = []

        for item in root.iter(_dav("response")):
            href = item.findtext(_dav("href"))
            if not href:
                continue
            entry_path = self._href_to_path(href)
            if entry_path == own_path:
                continue

            is_directory = item.find(f".//{_dav('resourcetype')}/{_dav('collection')}") is not None
            length = item.findtext(f".//{_dav('getcontentlength')}")
            entries.append(
                RemoteEntry(
                    name=posixpath.basename(entry_path),
                    path=entry_path,
                    is_directory=is_directory,
                    size=int(length) if length and length.isdigit() else 0,
                    content_type=item.findtext(f".//{_dav('getcontenttype')}"),
                )
            )

        return entries
