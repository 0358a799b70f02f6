"""
FTP Transport - NAS Access over FTP/FTPS

Implements the storage transport on ``ftplib``. The connection is opened
and authenticated on construction; ``close`` ends the session. Reply codes
are translated into the storage error taxonomy:

    530  -> auth
    550  -> not found
    421  -> connection
    timeouts -> timeout
    socket errors -> connection
"""

from __future__ import annotations

import ftplib
import io
import logging
import posixpath
import socket
from typing import Final

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

DEFAULT_PORT: Final[int] = 21
DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0

FTP = ftplib.FTP
FTP_TLS = ftplib.FTP_TLS


def _reply_code(error: BaseException) -> str:
    return str(error)[:3]


def translate_ftp_error(error: BaseException, path: str = "") -> StorageError:
    """Map an ftplib or socket failure to a storage error."""
    if isinstance(error, StorageError):
        return error
    if isinstance(error, (socket.timeout, TimeoutError)):
        return StorageTimeoutError("FTP server did not answer in time", path)
    if isinstance(error, ftplib.error_perm):
        code = _reply_code(error)
        if code == "530":
            return StorageAuthError("Credentials rejected by FTP server", path)
        if code == "550":
            return StorageNotFoundError("Remote path not found or not accessible", path)
        return UnknownStorageError(f"FTP command refused ({code})", path)
    if isinstance(error, ftplib.error_temp):
        if _reply_code(error) == "421":
            return StorageConnectionError("FTP service not available", path)
        return UnknownStorageError(f"FTP temporary failure ({_reply_code(error)})", path)
    if isinstance(error, (OSError, EOFError)):
        return StorageConnectionError("FTP server unreachable", path)
    return UnknownStorageError(f"FTP operation failed: {type(error).__name__}", path)


class FTPTransport:
    """
    One FTP session.

    Args:
        host: Server host name
        port: Server port
        username: Login user
        password: Login password
        secure: Use explicit FTPS (AUTH TLS) with a protected data channel
        timeout: Seconds per socket operation
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        username: str = "",
        password: str = "",
        secure: bool = False,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not host:
            raise StorageConnectionError("FTP host is not configured")

        self._ftp = FTP_TLS(timeout=timeout) if secure else FTP(timeout=timeout)
        try:
            self._ftp.connect(host, port)
            self._ftp.login(username, password)
            if secure:
                self._ftp.prot_p()
        except ftplib.all_errors as e:
            self._ftp.close()
            raise translate_ftp_error(e) from e

        logger.debug("FTP session opened: %s:%d", host, port)

    def _call(self, path: str, func, *args):
        try:
            return func(*args)
        except ftplib.all_errors as e:
            raise translate_ftp_error(e, path) from e

    def _is_directory(self, path: str) -> bool:
        try:
            self._ftp.cwd(path)
        except ftplib.error_perm as e:
            if _reply_code(e) == "550":
                return False
            raise translate_ftp_error(e, path) from e
        except ftplib.all_errors as e:
            raise translate_ftp_error(e, path) from e
        self._call(path, self._ftp.cwd, "/")
        return True

    # =========================================================================
    # Transport Operations
    # =========================================================================

    def exists(self, path: str) -> bool:
        if self._is_directory(path):
            return True
        try:
            self._ftp.voidcmd("TYPE I")
            self._ftp.size(path)
        except ftplib.error_perm as e:
            if _reply_code(e) == "550":
                return False
            raise translate_ftp_error(e, path) from e
        except ftplib.all_errors as e:
            raise translate_ftp_error(e, path) from e
        return True

    def make_directory(self, path: str, recursive: bool = True) -> None:
        if not recursive:
            self._call(path, self._ftp.mkd, path)
            return

        current = ""
        for part in [p for p in path.split("/") if p]:
            current = f"{current}/{part}"
            if not self._is_directory(current):
                self._call(current, self._ftp.mkd, current)
                logger.info("Created directory: %s", current)

    def put_file(self, path: str, content: bytes) -> None:
        self._call(path, self._ftp.storbinary, f"STOR {path}", io.BytesIO(content))

    def get_file(self, path: str) -> bytes:
        buffer = io.BytesIO()
        self._call(path, self._ftp.retrbinary, f"RETR {path}", buffer.write)
        return buffer.getvalue()

    def delete_file(self, path: str) -> None:
        self._call(path, self._ftp.delete, path)

    def list_directory(self, path: str) -> list[RemoteEntry]:
        facts = self._call(path, lambda: list(self._ftp.mlsd(path, facts=["type", "size"])))

        entries = []
        for name, info in facts:
            entry_type = info.get("type", "")
            if entry_type in ("cdir", "pdir") or name in (".", ".."):
                continue
            size = info.get("size", "0")
            entries.append(
                RemoteEntry(
                    name=name,
                    path=posixpath.join(path, name),
                    is_directory=entry_type == "dir",
                    size=int(size) if size.isdigit() else 0,
                )
            )
        return entries

    def close(self) -> None:
        try:
            self._ftp.quit()
        except ftplib.all_errors as e:
            logger.debug("FTP quit failed (%s), closing socket", e)
            self._ftp.close()
