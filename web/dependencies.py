"""
Shared request dependencies for the web layer.

Process-wide instances are created lazily from configuration. Tests replace
them through ``app.dependency_overrides``.
"""

from typing import Optional

from core.records import RecordStore, get_record_store
from core.storage import FileStoreGateway, build_gateway
from utils.config import Config


_config: Optional[Config] = None
_gateway: Optional[FileStoreGateway] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def get_store() -> RecordStore:
    return get_record_store(get_config().records_path)


def get_gateway() -> FileStoreGateway:
    global _gateway
    if _gateway is None:
        _gateway = build_gateway(get_config())
    return _gateway
