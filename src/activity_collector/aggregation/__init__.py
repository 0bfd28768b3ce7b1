"""Per-domain aggregation of the activity log."""

from activity_collector.aggregation.engine import aggregate
from activity_collector.aggregation.models import (
    AggregateResult,
    AggregateSummary,
    AggregationConfig,
    DomainAggregate,
    KeywordCount,
)

__all__ = [
    "aggregate",
    "AggregateResult",
    "AggregateSummary",
    "AggregationConfig",
    "DomainAggregate",
    "KeywordCount",
]
