"""Collector configuration resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from activity_collector.exceptions import ConfigError

DEFAULT_STORAGE_KEY = os.environ.get("ACTIVITY_STORAGE_KEY", "activity_events_v1")
DEFAULT_TOP_KEYWORDS = 10
# Seconds to wait after page load before sampling visible text.
DEFAULT_KEYWORD_SETTLE_DELAY = 3.0
# Pending exports are handed to the marketplace within this window.
DEFAULT_EXPORT_VALIDITY_MS = 5 * 60 * 1000
DEFAULT_LOG_DIR = Path.home() / ".activity-collector"


@dataclass
class CollectorConfig:
    """Static settings shared by the collector components."""

    storage_key: str = DEFAULT_STORAGE_KEY
    top_keywords: int = DEFAULT_TOP_KEYWORDS
    keyword_settle_delay: float = DEFAULT_KEYWORD_SETTLE_DELAY
    export_validity_ms: int = DEFAULT_EXPORT_VALIDITY_MS
    log_dir: Path = DEFAULT_LOG_DIR
    max_events: int | None = None
    max_age_ms: int | None = None

    def __post_init__(self) -> None:
        if not self.storage_key:
            raise ConfigError("storage_key must not be empty")
        if self.top_keywords < 1:
            raise ConfigError(f"top_keywords must be >= 1, got {self.top_keywords}")
        if self.keyword_settle_delay < 0:
            raise ConfigError("keyword_settle_delay must be non-negative")
        if self.max_events is not None and self.max_events < 1:
            raise ConfigError(f"max_events must be >= 1, got {self.max_events}")
        if self.max_age_ms is not None and self.max_age_ms < 1:
            raise ConfigError(f"max_age_ms must be >= 1, got {self.max_age_ms}")

    @classmethod
    def from_env(cls) -> CollectorConfig:
        """Build a config from ``ACTIVITY_*`` environment variables."""
        return cls(
            storage_key=os.environ.get("ACTIVITY_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            top_keywords=_env_int("ACTIVITY_TOP_KEYWORDS", DEFAULT_TOP_KEYWORDS),
            keyword_settle_delay=_env_float("ACTIVITY_KEYWORD_DELAY", DEFAULT_KEYWORD_SETTLE_DELAY),
            export_validity_ms=_env_int("ACTIVITY_EXPORT_VALIDITY_MS", DEFAULT_EXPORT_VALIDITY_MS),
            log_dir=Path(os.environ.get("ACTIVITY_LOG_DIR", str(DEFAULT_LOG_DIR))).expanduser(),
            max_events=_env_int("ACTIVITY_MAX_EVENTS", None),
            max_age_ms=_env_int("ACTIVITY_MAX_AGE_MS", None),
        )


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
