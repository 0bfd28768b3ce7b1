"""Data models for per-domain aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field

from activity_collector.config import DEFAULT_TOP_KEYWORDS
from activity_collector.exceptions import AggregationError


@dataclass(frozen=True)
class AggregationConfig:
    """Per-request aggregation settings."""

    top_keywords: int = DEFAULT_TOP_KEYWORDS

    def __post_init__(self) -> None:
        if isinstance(self.top_keywords, bool) or not isinstance(self.top_keywords, int):
            raise AggregationError("top_keywords must be an integer")
        if self.top_keywords < 0:
            raise AggregationError(f"top_keywords must be >= 0, got {self.top_keywords}")


@dataclass(frozen=True)
class KeywordCount:
    keyword: str
    count: int


@dataclass(frozen=True)
class DomainAggregate:
    """Privacy-reduced statistics for one domain."""

    visit_count: int = 0
    total_time_ms: int = 0
    avg_dwell_ms: int = 0
    click_count: int = 0
    max_scroll_percent: int = 0
    top_keywords: tuple[KeywordCount, ...] = ()
    categories: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "visit_count": self.visit_count,
            "total_time_ms": self.total_time_ms,
            "avg_dwell_ms": self.avg_dwell_ms,
            "click_count": self.click_count,
            "max_scroll_percent": self.max_scroll_percent,
            "topKeywords": [
                {"keyword": k.keyword, "count": k.count} for k in self.top_keywords
            ],
            "categories": dict(self.categories),
        }


@dataclass(frozen=True)
class AggregateSummary:
    total_domains: int = 0
    total_events: int = 0

    def to_dict(self) -> dict:
        return {"totalDomains": self.total_domains, "totalEvents": self.total_events}


@dataclass(frozen=True)
class AggregateResult:
    """Output of ``aggregate``: a summary plus one aggregate per domain."""

    summary: AggregateSummary
    domains: dict[str, DomainAggregate]

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "domains": {name: agg.to_dict() for name, agg in self.domains.items()},
        }
