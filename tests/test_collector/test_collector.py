"""Tests for the background activity collector."""

import asyncio
import hashlib

import pytest

from activity_collector.collector.collector import ActivityCollector
from activity_collector.config import CollectorConfig
from activity_collector.events.preferences import CollectionPreferences
from activity_collector.exceptions import StorageWriteError
from activity_collector.store.event_store import EventStore
from activity_collector.store.json_file import JsonFileLogBackend
from activity_collector.store.memory import MemoryLogBackend


class FakeClock:
    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


class FailingWrites(MemoryLogBackend):
    async def save(self, key, events):
        raise StorageWriteError("storage offline")


def _collector(backend=None, prefs=None, clock=None):
    store = EventStore(backend or MemoryLogBackend(), prefs=prefs)
    config = CollectorConfig(keyword_settle_delay=0)
    return ActivityCollector(store, config=config, clock=clock or FakeClock())


def test_navigation_event_shape():
    async def run():
        collector = _collector()
        url = "https://news.example.com/world?id=1"
        event = await collector.on_navigation_committed(
            5, url, title="World", transition_qualifiers=["from_address_bar"]
        )
        return event.to_dict()

    out = asyncio.run(run())
    assert out == {
        "type": "navigation",
        "ts": 1000,
        "tabId": 5,
        "domain": "news.example.com",
        "url_hash": hashlib.sha256(b"https://news.example.com/world?id=1").hexdigest(),
        "sessionId": "5-1000",
        "category": "news",
        "title": "World",
        "referrer": "from_address_bar",
    }


def test_session_lifecycle_through_collector():
    async def run():
        clock = FakeClock(1000)
        collector = _collector(clock=clock)
        await collector.on_navigation_committed(5, "https://a.com/")
        clock.now = 2000
        second = await collector.on_navigation_committed(5, "https://a.com/next")
        clock.now = 5000
        end = await collector.on_tab_removed(5)
        return second, end

    second, end = asyncio.run(run())
    assert second.session_id == "5-1000"
    assert end.to_dict() == {
        "type": "session_end",
        "ts": 5000,
        "tabId": 5,
        "sessionId": "5-1000",
        "duration_ms": 4000,
    }


def test_session_end_kept_with_sessions_and_time_off():
    async def run():
        clock = FakeClock(1000)
        prefs = CollectionPreferences.from_dict({"enabled": {"sessions": False, "timeOnPage": False}})
        collector = _collector(prefs=prefs, clock=clock)
        await collector.on_navigation_committed(5, "https://a.com/")
        clock.now = 5000
        await collector.on_tab_removed(5)
        return await collector.export_raw()

    raw = asyncio.run(run())
    assert [e["type"] for e in raw] == ["navigation", "session_end"]
    assert raw[1] == {"type": "session_end", "ts": 5000, "tabId": 5}


def test_subframe_navigation_ignored():
    async def run():
        collector = _collector()
        assert await collector.on_navigation_committed(1, "https://a.com/", frame_id=3) is None
        assert await collector.on_navigation_completed(1, "https://a.com/", frame_id=3) is None
        assert len(collector.tracker) == 0
        assert await collector.export_raw() == []

    asyncio.run(run())


def test_tab_removed_without_session():
    async def run():
        collector = _collector()
        assert await collector.on_tab_removed(99) is None

    asyncio.run(run())


def test_session_dropped_even_if_store_fails():
    async def run():
        collector = _collector(backend=FailingWrites())
        with pytest.raises(StorageWriteError):
            await collector.on_navigation_committed(4, "https://a.com/")
        assert collector.tracker.session_id(4) == "4-1000"
        with pytest.raises(StorageWriteError):
            await collector.on_tab_removed(4)
        assert collector.tracker.session_id(4) is None

    asyncio.run(run())


def test_page_event_is_stamped():
    async def run():
        collector = _collector()
        await collector.on_navigation_committed(2, "https://docs.python.org/3/")
        event = await collector.on_page_event(
            2,
            "https://docs.python.org/3/library/",
            {"type": "interaction", "interactionType": "click", "ts": 1,
             "tabId": 77, "descriptor": {"tag": "A", "classes": ["reference"]}},
            meta={"language": "en-GB", "screen": {"width": 1280, "height": 800}},
            platform_os="mac",
        )
        return event.to_dict()

    out = asyncio.run(run())
    assert out["ts"] == 1000
    assert out["tabId"] == 2
    assert out["domain"] == "docs.python.org"
    assert out["sessionId"] == "2-1000"
    assert out["descriptor"] == {"tag": "A", "classes": ["reference"]}
    assert out["meta"] == {"language": "en-GB", "screen": {"width": 1280, "height": 800}, "os": "mac"}


def test_page_event_respects_preferences():
    async def run():
        prefs = CollectionPreferences.from_dict({"enabled": {"interactions": False, "metadata": False}})
        collector = _collector(prefs=prefs)
        click = await collector.on_page_event(1, "https://a.com/", {"type": "interaction", "interactionType": "click"})
        dwell = await collector.on_page_event(
            1, "https://a.com/", {"type": "dwell", "duration_ms": 1500}, meta={"language": "en"}
        )
        return click, dwell

    click, dwell = asyncio.run(run())
    assert click is None
    assert dwell.duration_ms == 1500
    assert dwell.meta is None


def test_global_off_stores_nothing_but_tracks_sessions():
    async def run():
        collector = _collector(prefs=CollectionPreferences(global_enabled=False))
        await collector.on_navigation_committed(1, "https://a.com/")
        assert await collector.export_raw() == []
        assert collector.tracker.session_id(1) == "1-1000"

    asyncio.run(run())


def test_title_and_load_events():
    async def run():
        collector = _collector()
        assert await collector.on_title_changed(3, "", "https://a.com/") is None
        title = await collector.on_title_changed(3, "Inbox (3)", "https://mail.example.org/")
        load = await collector.on_navigation_completed(3, "https://mail.example.org/")
        return title, load

    title, load = asyncio.run(run())
    assert title.title == "Inbox (3)"
    assert load.domain == "mail.example.org"


def test_sample_keywords_once_per_visit():
    page = "<body><p>Sourdough starter hydration guide</p><p>starter feeding schedule</p></body>"

    async def run():
        clock = FakeClock(1000)
        collector = _collector(clock=clock)
        await collector.on_navigation_committed(8, "https://bread.example/")
        first = await collector.sample_keywords(8, "https://bread.example/", lambda: page)
        repeat = await collector.sample_keywords(8, "https://bread.example/", lambda: page)
        clock.now = 2000
        await collector.on_navigation_committed(8, "https://bread.example/other")
        next_visit = await collector.sample_keywords(8, "https://bread.example/other", lambda: page)
        return first, repeat, next_visit

    first, repeat, next_visit = asyncio.run(run())
    assert first.keywords[0] == "starter"
    assert first.session_id == "8-1000"
    assert repeat is None
    assert next_visit is not None


def test_sample_before_navigation_is_released():
    page = "<body><p>Orphaned pages still have keywords</p></body>"

    async def run():
        collector = _collector()
        await collector.sample_keywords(6, "https://a.com/", lambda: page)
        assert collector.sampler.was_sampled((6, None))
        await collector.on_tab_removed(6)
        assert not collector.sampler.was_sampled((6, None))

        await collector.sample_keywords(7, "https://a.com/", lambda: page)
        await collector.on_navigation_committed(7, "https://a.com/")
        assert not collector.sampler.was_sampled((7, None))

    asyncio.run(run())


def test_get_aggregated_and_delete_domain():
    async def run():
        clock = FakeClock(1000)
        collector = _collector(clock=clock)
        await collector.on_navigation_committed(1, "https://a.com/")
        await collector.on_page_event(1, "https://a.com/", {"type": "dwell", "duration_ms": 1000})
        await collector.on_page_event(1, "https://a.com/", {"type": "dwell", "duration_ms": 3000})
        await collector.on_page_event(
            1, "https://a.com/", {"type": "keywords", "keywords": ["one", "two", "three"]}
        )
        await collector.on_navigation_committed(2, "https://b.com/")
        full = await collector.get_aggregated(top_keywords=2)
        removed = await collector.delete_domain("b.com")
        after = await collector.get_aggregated()
        return full, removed, after

    full, removed, after = asyncio.run(run())
    out = full.to_dict()
    assert out["summary"] == {"totalDomains": 2, "totalEvents": 5}
    assert out["domains"]["a.com"]["avg_dwell_ms"] == 2000
    assert out["domains"]["a.com"]["total_time_ms"] == 4000
    assert [k["keyword"] for k in out["domains"]["a.com"]["topKeywords"]] == ["one", "two"]
    assert removed == 1
    assert set(after.domains) == {"a.com"}


def test_clear():
    async def run():
        collector = _collector()
        await collector.on_navigation_committed(1, "https://a.com/")
        await collector.clear()
        return await collector.export_raw()

    assert asyncio.run(run()) == []


def test_update_preferences_from_document():
    async def run():
        collector = _collector()
        collector.update_preferences({"global": False})
        await collector.on_navigation_committed(1, "https://a.com/")
        collector.update_preferences({"global": True, "enabled": {"titles": False}})
        await collector.on_title_changed(1, "Private", "https://a.com/")
        return await collector.export_raw()

    raw = asyncio.run(run())
    assert len(raw) == 1
    assert "title" not in raw[0]


def test_from_config(tmp_path):
    config = CollectorConfig(log_dir=tmp_path, storage_key="events", max_events=2, keyword_settle_delay=0)

    async def run():
        collector = ActivityCollector.from_config(config, prefs={"global": True})
        collector._clock = FakeClock(1)
        for tab in range(3):
            await collector.on_navigation_committed(tab, "https://a.com/")
        return collector

    collector = asyncio.run(run())
    assert isinstance(collector.store.backend, JsonFileLogBackend)
    assert (tmp_path / "events.json").exists()
    assert collector.store.retention.max_events == 2
