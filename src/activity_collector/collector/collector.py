"""Route browser hooks and page signals into the event log."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from activity_collector.aggregation import AggregationConfig, aggregate
from activity_collector.collector.urls import classify_url, extract_domain, hash_url
from activity_collector.config import CollectorConfig
from activity_collector.events.models import KEYWORDS, ActivityEvent, LoadEvent, NavigationEvent, TitleEvent
from activity_collector.events.preferences import CollectionPreferences
from activity_collector.export import ExportedDataset, build_export
from activity_collector.keywords.sampler import HtmlSource, KeywordSampler
from activity_collector.sessions import SessionTracker
from activity_collector.store import EventStore, JsonFileLogBackend, RetentionPolicy

logger = logging.getLogger(__name__)

# Only top-level frames start or continue sessions.
TOP_LEVEL_FRAME = 0


def _now_ms() -> int:
    return int(time.time() * 1000)


class ActivityCollector:
    """Background collector tying sessions, the event log and exports together.

    Browser navigation hooks and page instrumentation call the ``on_*``
    methods; the marketplace side calls ``get_aggregated`` and
    ``export_raw``. URLs are reduced to a domain, a SHA-256 hash and a coarse
    category before anything is stored.

    Args:
        store: The shared event log.
        tracker: Per-tab session registry (a new one by default).
        config: Collector settings.
        clock: Returns the current time in epoch milliseconds.
        sampler: One-shot keyword sampler for page visits.
    """

    def __init__(
        self,
        store: EventStore,
        tracker: SessionTracker | None = None,
        config: CollectorConfig | None = None,
        clock: Callable[[], int] | None = None,
        sampler: KeywordSampler | None = None,
    ):
        self.store = store
        self.tracker = tracker or SessionTracker()
        self.config = config or CollectorConfig()
        self._clock = clock or _now_ms
        self.sampler = sampler or KeywordSampler(
            settle_delay=self.config.keyword_settle_delay,
            limit=self.config.top_keywords,
        )
        # tab id -> ts of the navigation that started the current page visit
        self._visit_starts: dict[int, int] = {}

    @classmethod
    def from_config(
        cls,
        config: CollectorConfig,
        prefs: CollectionPreferences | Mapping | None = None,
    ) -> ActivityCollector:
        """Collector persisting its log as JSON under ``config.log_dir``."""
        retention = None
        if config.max_events is not None or config.max_age_ms is not None:
            retention = RetentionPolicy(max_events=config.max_events, max_age_ms=config.max_age_ms)
        store = EventStore(
            JsonFileLogBackend(config.log_dir),
            prefs=_resolve_prefs(prefs),
            storage_key=config.storage_key,
            retention=retention,
        )
        return cls(store, config=config)

    def update_preferences(self, prefs: CollectionPreferences | Mapping | None) -> None:
        self.store.update_preferences(_resolve_prefs(prefs))

    # ------------------------------------------------------------------
    # Browser hooks
    # ------------------------------------------------------------------

    async def on_navigation_committed(
        self,
        tab_id: int,
        url: str,
        frame_id: int = TOP_LEVEL_FRAME,
        title: str = "",
        transition_qualifiers: list[str] | None = None,
    ) -> ActivityEvent | None:
        """A top-level navigation was committed in ``tab_id``."""
        if frame_id != TOP_LEVEL_FRAME:
            return None
        now = self._clock()
        session = self.tracker.touch(tab_id, now)
        # Also clears a sample taken before any navigation was seen.
        self.sampler.forget((tab_id, self._visit_starts.get(tab_id)))
        self._visit_starts[tab_id] = now

        domain = extract_domain(url)
        event = NavigationEvent(
            ts=now,
            tab_id=tab_id,
            domain=domain,
            url_hash=hash_url(url),
            session_id=session.session_id,
            category=classify_url(url, domain),
            title=title or None,
            referrer=",".join(transition_qualifiers or []) or None,
        )
        return await self.store.append(event)

    async def on_navigation_completed(
        self,
        tab_id: int,
        url: str,
        frame_id: int = TOP_LEVEL_FRAME,
    ) -> ActivityEvent | None:
        """A top-level page finished loading."""
        if frame_id != TOP_LEVEL_FRAME:
            return None
        event = LoadEvent(
            ts=self._clock(),
            tab_id=tab_id,
            domain=extract_domain(url),
            url_hash=hash_url(url),
        )
        return await self.store.append(event)

    async def on_title_changed(self, tab_id: int, title: str, url: str) -> ActivityEvent | None:
        if not title:
            return None
        event = TitleEvent(
            ts=self._clock(),
            tab_id=tab_id,
            domain=extract_domain(url),
            url_hash=hash_url(url),
            title=title,
        )
        return await self.store.append(event)

    async def on_tab_removed(self, tab_id: int) -> ActivityEvent | None:
        """End the tab's session and record a ``session_end`` event.

        The session is dropped from the registry even if storing fails.
        """
        now = self._clock()
        end_event = self.tracker.end(tab_id, now)
        self.sampler.forget((tab_id, self._visit_starts.pop(tab_id, None)))
        if end_event is None:
            return None
        return await self.store.append(end_event)

    # ------------------------------------------------------------------
    # Page instrumentation
    # ------------------------------------------------------------------

    async def on_page_event(
        self,
        tab_id: int | None,
        url: str,
        event: Mapping[str, Any],
        meta: Mapping[str, Any] | None = None,
        platform_os: str | None = None,
    ) -> ActivityEvent | None:
        """Record a click/scroll/dwell/keywords signal sent by a page.

        Timestamp, tab, domain, URL hash and session are stamped here and
        override anything the page supplied.
        """
        domain = extract_domain(url)
        raw = dict(event)
        raw.update({
            "ts": self._clock(),
            "tabId": tab_id,
            "domain": domain,
            "url_hash": hash_url(url),
            "sessionId": self.tracker.session_id(tab_id),
        })
        raw.pop("meta", None)
        if meta:
            coarse: dict[str, Any] = {}
            if meta.get("language"):
                coarse["language"] = meta["language"]
            if meta.get("screen"):
                coarse["screen"] = meta["screen"]
            if platform_os:
                coarse["os"] = platform_os
            raw["meta"] = coarse
        return await self.store.append(raw)

    async def sample_keywords(
        self,
        tab_id: int,
        url: str,
        get_html: HtmlSource,
        meta: Mapping[str, Any] | None = None,
    ) -> ActivityEvent | None:
        """Sample keywords for the tab's current page visit, once."""
        visit_key = (tab_id, self._visit_starts.get(tab_id))
        keywords = await self.sampler.sample(visit_key, get_html)
        if not keywords:
            return None
        return await self.on_page_event(tab_id, url, {"type": KEYWORDS, "keywords": keywords}, meta=meta)

    # ------------------------------------------------------------------
    # Export and deletion
    # ------------------------------------------------------------------

    async def get_aggregated(self, top_keywords: int | None = None) -> ExportedDataset:
        """Aggregate the whole log into an export envelope."""
        raw = await self.store.get_raw()
        config = AggregationConfig(
            top_keywords=top_keywords if top_keywords is not None else self.config.top_keywords
        )
        return build_export(aggregate(raw, config), len(raw))

    async def export_raw(self) -> list[dict]:
        """The stored events as-is (URLs are only present as hashes)."""
        return await self.store.get_raw()

    async def delete_domain(self, domain: str) -> int:
        return await self.store.remove_domain(domain)

    async def clear(self) -> None:
        await self.store.clear()


def _resolve_prefs(prefs: CollectionPreferences | Mapping | None) -> CollectionPreferences:
    if isinstance(prefs, CollectionPreferences):
        return prefs
    return CollectionPreferences.from_dict(prefs)
