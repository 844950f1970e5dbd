"""Service layer for app-publisher"""

from .config_service import ConfigService
from .publish_service import PublishService, PublishAttempt
from .record_store import RecordStore, InMemoryRecordStore, YamlRecordStore

__all__ = [
    "ConfigService",
    "PublishService",
    "PublishAttempt",
    "RecordStore",
    "InMemoryRecordStore",
    "YamlRecordStore",
]
