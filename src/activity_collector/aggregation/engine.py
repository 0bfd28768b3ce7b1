"""Fold the raw event log into per-domain statistics."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from activity_collector.aggregation.models import (
    AggregateResult,
    AggregateSummary,
    AggregationConfig,
    DomainAggregate,
    KeywordCount,
)
from activity_collector.events.models import (
    CLICK,
    LOAD,
    NAVIGATION,
    SCROLL,
    TITLE,
    UNKNOWN_DOMAIN,
    ActivityEvent,
    DwellEvent,
    InteractionEvent,
    KeywordsEvent,
)
from activity_collector.events.parser import parse_event

logger = logging.getLogger(__name__)

VISIT_TYPES = frozenset({NAVIGATION, LOAD, TITLE})


class _DomainBucket:
    """Running totals for one domain while scanning the log."""

    __slots__ = (
        "visit_count",
        "total_time_ms",
        "dwell_count",
        "click_count",
        "max_scroll",
        "keyword_counts",
        "categories",
    )

    def __init__(self) -> None:
        self.visit_count = 0
        self.total_time_ms = 0
        self.dwell_count = 0
        self.click_count = 0
        self.max_scroll = 0
        # dicts keep first-seen order, which breaks keyword count ties.
        self.keyword_counts: dict[str, int] = {}
        self.categories: dict[str, int] = {}

    def add(self, event: ActivityEvent) -> None:
        if event.type in VISIT_TYPES:
            self.visit_count += 1

        if isinstance(event, DwellEvent) and event.duration_ms is not None:
            self.total_time_ms += event.duration_ms
            self.dwell_count += 1

        if isinstance(event, InteractionEvent):
            if event.interaction_type == CLICK:
                self.click_count += 1
            elif event.interaction_type == SCROLL and event.max_scroll_percent is not None:
                self.max_scroll = max(self.max_scroll, event.max_scroll_percent)

        if isinstance(event, KeywordsEvent) and event.keywords:
            for keyword in event.keywords:
                self.keyword_counts[keyword] = self.keyword_counts.get(keyword, 0) + 1

        if event.category:
            self.categories[event.category] = self.categories.get(event.category, 0) + 1

    def finalize(self, top_keywords: int) -> DomainAggregate:
        ranked = sorted(self.keyword_counts.items(), key=lambda item: -item[1])
        return DomainAggregate(
            visit_count=self.visit_count,
            total_time_ms=self.total_time_ms,
            avg_dwell_ms=_round_half_up(self.total_time_ms / self.dwell_count)
            if self.dwell_count
            else 0,
            click_count=self.click_count,
            max_scroll_percent=self.max_scroll,
            top_keywords=tuple(
                KeywordCount(keyword=k, count=c) for k, c in ranked[:top_keywords]
            ),
            categories=dict(self.categories),
        )


def aggregate(
    events: Iterable[Any],
    config: AggregationConfig | None = None,
) -> AggregateResult:
    """Single pass over ``events`` grouping statistics by domain.

    ``events`` may hold typed events or raw mappings; raw entries that cannot
    be decoded still count toward ``totalEvents`` but feed no domain.
    Events without a domain are grouped under ``"unknown"``. The function is
    pure: the same input and config always produce the same result.
    """
    config = config or AggregationConfig()
    buckets: dict[str, _DomainBucket] = {}
    total = 0
    skipped = 0

    for raw in events:
        total += 1
        event = parse_event(raw, require_ts=False)
        if event is None:
            skipped += 1
            continue
        domain = event.domain or UNKNOWN_DOMAIN
        bucket = buckets.get(domain)
        if bucket is None:
            bucket = buckets[domain] = _DomainBucket()
        bucket.add(event)

    if skipped:
        logger.debug("Skipped %d undecodable events during aggregation", skipped)

    domains = {name: bucket.finalize(config.top_keywords) for name, bucket in buckets.items()}
    return AggregateResult(
        summary=AggregateSummary(total_domains=len(domains), total_events=total),
        domains=domains,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
