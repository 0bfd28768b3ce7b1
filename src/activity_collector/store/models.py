"""Data models for the event store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class RetentionPolicy:
    """Optional bounds on the persisted log.

    Both limits default to None, which keeps every event until an explicit
    clear or domain deletion.
    """

    max_events: int | None = None
    max_age_ms: int | None = None

    def apply(self, events: list[dict], now: int) -> list[dict]:
        """Drop expired events, then keep only the newest ``max_events``."""
        kept = events
        if self.max_age_ms is not None:
            cutoff = now - self.max_age_ms
            kept = [e for e in kept if not _older_than(e, cutoff)]
        if self.max_events is not None and len(kept) > self.max_events:
            kept = kept[-self.max_events:]
        return kept


def _older_than(event: dict, cutoff: int) -> bool:
    ts = event.get("ts")
    return isinstance(ts, (int, float)) and not isinstance(ts, bool) and ts < cutoff


@dataclass(frozen=True)
class CollectedDataInfo:
    """Inventory of the stored log, used when listing a dataset."""

    size: int
    time_range: str
    is_empty: bool
    first_ts: int | None = None
    last_ts: int | None = None

    @classmethod
    def from_timestamps(cls, size: int, timestamps: list[int]) -> CollectedDataInfo:
        if size == 0:
            return cls(size=0, time_range="No data collected", is_empty=True)
        if not timestamps:
            return cls(size=size, time_range="Unknown", is_empty=False)
        first, last = min(timestamps), max(timestamps)
        start_date = _ms_to_date(first)
        end_date = _ms_to_date(last)
        time_range = start_date if start_date == end_date else f"{start_date} - {end_date}"
        return cls(
            size=size,
            time_range=time_range,
            is_empty=False,
            first_ts=first,
            last_ts=last,
        )

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "timeRange": self.time_range,
            "isEmpty": self.is_empty,
            "firstTs": self.first_ts,
            "lastTs": self.last_ts,
        }


def _ms_to_date(ts: int) -> str:
    return datetime.fromtimestamp(ts / 1000, tz=timezone.utc).date().isoformat()
