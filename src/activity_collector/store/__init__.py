"""Persisted event log and its storage backends."""

from activity_collector.store.base import BaseLogBackend
from activity_collector.store.event_store import EventStore
from activity_collector.store.json_file import JsonFileLogBackend
from activity_collector.store.memory import MemoryLogBackend
from activity_collector.store.models import CollectedDataInfo, RetentionPolicy

__all__ = [
    "BaseLogBackend",
    "EventStore",
    "JsonFileLogBackend",
    "MemoryLogBackend",
    "CollectedDataInfo",
    "RetentionPolicy",
]
