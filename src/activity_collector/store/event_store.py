"""Append-only persisted log of sanitized activity events."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Any, Callable

from activity_collector.config import DEFAULT_STORAGE_KEY
from activity_collector.events.models import UNKNOWN_DOMAIN, ActivityEvent
from activity_collector.events.parser import parse_event
from activity_collector.events.preferences import CollectionPreferences
from activity_collector.events.sanitizer import sanitize
from activity_collector.store.base import BaseLogBackend
from activity_collector.store.models import CollectedDataInfo, RetentionPolicy

logger = logging.getLogger(__name__)


class EventStore:
    """The shared event log behind one storage key.

    Every mutation is a read-modify-write of the whole array and is
    serialized through a single lock, so appends from different tabs and
    user deletions never interleave their writes.

    Args:
        backend: Storage backend holding the JSON array.
        prefs: Resolved collection preferences; replaced via
            ``update_preferences``.
        storage_key: Key of the log inside the backend.
        retention: Optional eviction bounds applied on every append.
    """

    def __init__(
        self,
        backend: BaseLogBackend,
        prefs: CollectionPreferences | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        retention: RetentionPolicy | None = None,
    ):
        self.backend = backend
        self.storage_key = storage_key
        self.retention = retention
        self._prefs = prefs or CollectionPreferences()
        self._lock = asyncio.Lock()

    @property
    def preferences(self) -> CollectionPreferences:
        return self._prefs

    def update_preferences(self, prefs: CollectionPreferences) -> None:
        """Swap in preferences after an external change notification."""
        self._prefs = prefs
        logger.info(
            "Collection preferences updated (global=%s)", prefs.global_enabled
        )

    async def append(self, event: Any) -> ActivityEvent | None:
        """Sanitize and append one event; returns what was stored.

        Returns None without touching storage when collection is globally
        disabled or the event is dropped by the preference filter.
        """
        prefs = self._prefs
        if not prefs.global_enabled:
            return None
        sanitized = sanitize(event, prefs)
        if sanitized is None:
            return None

        async with self._lock:
            stored = await self.backend.load(self.storage_key)
            stored.append(sanitized.to_dict())
            if self.retention is not None:
                before = len(stored)
                stored = self.retention.apply(stored, now=sanitized.ts)
                if len(stored) < before:
                    logger.debug("Retention evicted %d events", before - len(stored))
            await self.backend.save(self.storage_key, stored)
        return sanitized

    async def get_raw(self) -> list[dict]:
        """The persisted array as stored."""
        async with self._lock:
            return await self.backend.load(self.storage_key)

    async def get_all(self) -> list[ActivityEvent]:
        """All stored events in arrival order, as typed events."""
        events: list[ActivityEvent] = []
        for raw in await self.get_raw():
            event = parse_event(raw)
            if event is None:
                logger.warning("Skipping unreadable stored event: %r", raw)
                continue
            events.append(event)
        return events

    async def remove_where(self, predicate: Callable[[ActivityEvent], bool]) -> int:
        """Delete every stored event matching ``predicate``.

        Entries that cannot be decoded are kept. Returns the number removed.
        """
        async with self._lock:
            stored = await self.backend.load(self.storage_key)
            kept = []
            for raw in stored:
                event = parse_event(raw)
                if event is not None and predicate(event):
                    continue
                kept.append(raw)
            removed = len(stored) - len(kept)
            if removed:
                await self.backend.save(self.storage_key, kept)
        return removed

    async def remove_domain(self, domain: str) -> int:
        """Delete all events of one domain (``"unknown"`` matches no domain)."""
        removed = await self.remove_where(
            lambda e: (e.domain or UNKNOWN_DOMAIN) == domain
        )
        logger.info("Deleted %d events for %s", removed, domain)
        return removed

    async def clear(self) -> None:
        """Delete the whole log."""
        async with self._lock:
            await self.backend.delete(self.storage_key)
        logger.info("Cleared event log %s", self.storage_key)

    async def count(self) -> int:
        return len(await self.get_raw())

    async def domain_counts(self) -> list[tuple[str, int]]:
        """Event count per domain, most frequent first."""
        counts = Counter(
            (e.domain or UNKNOWN_DOMAIN) for e in await self.get_all()
        )
        return sorted(counts.items(), key=lambda item: item[1], reverse=True)

    async def collected_data_info(self) -> CollectedDataInfo:
        raw = await self.get_raw()
        timestamps = [
            e["ts"] for e in raw
            if isinstance(e, dict) and isinstance(e.get("ts"), int) and not isinstance(e.get("ts"), bool)
        ]
        return CollectedDataInfo.from_timestamps(len(raw), timestamps)
