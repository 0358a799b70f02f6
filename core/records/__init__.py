"""
Makler CRM - Record Persistence and Write Orchestration
"""

from core.records.store import (
    RecordStore,
    InMemoryRecordStore,
    IntegrityError,
    RecordNotFoundError,
    get_record_store,
    reset_record_store,
)
from core.records.service import RecordService

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
    "IntegrityError",
    "RecordNotFoundError",
    "get_record_store",
    "reset_record_store",
    "RecordService",
]
