"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "./data"))

    # Storage
    storage_backend: str = field(
        default_factory=lambda: os.getenv("STORAGE_BACKEND", "webdav").lower()
    )
    storage_timeout: float = field(
        default_factory=lambda: float(os.getenv("STORAGE_TIMEOUT", "10"))
    )
    create_all_categories: bool = field(
        default_factory=lambda: _env_bool("STORAGE_CREATE_ALL_CATEGORIES", "true")
    )

    # WebDAV
    webdav_url: str = field(default_factory=lambda: os.getenv("NAS_WEBDAV_URL", ""))
    webdav_username: str = field(default_factory=lambda: os.getenv("NAS_USERNAME", ""))
    webdav_password: str = field(default_factory=lambda: os.getenv("NAS_PASSWORD", ""))
    webdav_base_path: str = field(
        default_factory=lambda: os.getenv(
            "NAS_BASE_PATH",
            "/volume1/Daten/Allianz/Agentur Jaeger/Beratung/Immobilienmakler/Verkauf",
        )
    )

    # FTP
    ftp_host: str = field(default_factory=lambda: os.getenv("FTP_HOST", ""))
    ftp_port: int = field(default_factory=lambda: int(os.getenv("FTP_PORT", "21")))
    ftp_username: str = field(default_factory=lambda: os.getenv("FTP_USER", ""))
    ftp_password: str = field(default_factory=lambda: os.getenv("FTP_PASSWORD", ""))
    ftp_secure: bool = field(default_factory=lambda: _env_bool("FTP_SECURE", "false"))
    ftp_base_path: str = field(
        default_factory=lambda: os.getenv(
            "FTP_BASE_PATH",
            "/Daten/Allianz/Agentur Jaeger/Beratung/Immobilienmakler/Verkauf",
        )
    )

    # Contact documents and public links
    contact_base_path: str = field(
        default_factory=lambda: os.getenv("NAS_CONTACT_BASE_PATH", "/Daten/Allianz/Agentur Jaeger")
    )
    nas_public_domain: str = field(
        default_factory=lambda: os.getenv("NAS_PUBLIC_DOMAIN", os.getenv("NAS_WEBDAV_URL", ""))
    )

    @property
    def storage_base_path(self) -> str:
        """Property folder root for the selected backend."""
        if self.storage_backend == "ftp":
            return self.ftp_base_path
        return self.webdav_base_path

    @property
    def records_path(self) -> str:
        """JSON file backing the record store."""
        return os.path.join(self.data_dir, "records.json")

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary (credentials masked)."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "data_dir": self.data_dir,
            "storage_backend": self.storage_backend,
            "storage_timeout": self.storage_timeout,
            "storage_base_path": self.storage_base_path,
            "create_all_categories": self.create_all_categories,
            "webdav_url": self.webdav_url,
            "webdav_username": self.webdav_username,
            "webdav_password": "***" if self.webdav_password else "",
            "ftp_host": self.ftp_host,
            "ftp_port": self.ftp_port,
            "ftp_username": self.ftp_username,
            "ftp_password": "***" if self.ftp_password else "",
            "ftp_secure": self.ftp_secure,
            "contact_base_path": self.contact_base_path,
            "nas_public_domain": self.nas_public_domain,
        }
