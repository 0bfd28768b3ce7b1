"""Wrap aggregation output in an exportable dataset envelope."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import dateutil.parser as parser

from activity_collector.aggregation.models import AggregateResult, AggregateSummary, DomainAggregate
from activity_collector.config import DEFAULT_EXPORT_VALIDITY_MS
from activity_collector.exceptions import ExportError

logger = logging.getLogger(__name__)

EXPORT_SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class ExportedDataset:
    """An aggregation result ready to hand to a downstream consumer."""

    summary: AggregateSummary
    domains: dict[str, DomainAggregate]
    exported_at: str  # ISO 8601, UTC
    version: str = EXPORT_SCHEMA_VERSION

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "domains": {name: agg.to_dict() for name, agg in self.domains.items()},
            "exportedAt": self.exported_at,
            "version": self.version,
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def build_export(
    aggregate_result: AggregateResult,
    raw_event_count: int,
    now: datetime | None = None,
) -> ExportedDataset:
    """Stamp ``aggregate_result`` with export time, schema version and totals."""
    if not isinstance(aggregate_result, AggregateResult):
        raise ExportError(
            f"Expected an AggregateResult, got {type(aggregate_result).__name__}"
        )
    if isinstance(raw_event_count, bool) or not isinstance(raw_event_count, int) or raw_event_count < 0:
        raise ExportError(f"raw_event_count must be a non-negative integer, got {raw_event_count!r}")

    exported_at = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    summary = AggregateSummary(
        total_domains=len(aggregate_result.domains),
        total_events=raw_event_count,
    )
    dataset = ExportedDataset(
        summary=summary,
        domains=dict(aggregate_result.domains),
        exported_at=exported_at.isoformat().replace("+00:00", "Z"),
    )
    logger.info(
        "Built export: %d domains, %d events", summary.total_domains, summary.total_events
    )
    return dataset


def is_export_fresh(
    dataset: ExportedDataset | dict,
    now: datetime | None = None,
    validity_ms: int = DEFAULT_EXPORT_VALIDITY_MS,
) -> bool:
    """Whether a pending export is still within its hand-off window."""
    exported_at = dataset.exported_at if isinstance(dataset, ExportedDataset) else dataset.get("exportedAt")
    if not exported_at:
        return False
    try:
        stamp = parser.isoparse(exported_at)
    except (ValueError, TypeError) as e:
        raise ExportError(f"Invalid exportedAt timestamp: {exported_at!r}") from e
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    age_ms = (now - stamp).total_seconds() * 1000
    return 0 <= age_ms < validity_ms


def compute_data_hash(value: Any) -> str:
    """SHA-256 commitment over a key-sorted JSON rendering of ``value``."""
    if isinstance(value, ExportedDataset):
        value = value.to_dict()
    try:
        stable = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ExportError(f"Value is not JSON serializable: {e}") from e
    return "0x" + hashlib.sha256(stable.encode("utf-8")).hexdigest()
