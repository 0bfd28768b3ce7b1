"""User collection preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from activity_collector.exceptions import PreferencesError

URLS = "urls"
TITLES = "titles"
TIME_ON_PAGE = "timeOnPage"
INTERACTIONS = "interactions"
REFERRERS = "referrers"
SESSIONS = "sessions"
CATEGORIES = "categories"
METADATA = "metadata"
KEYWORDS = "keywords"

ALL_CATEGORIES = (
    URLS,
    TITLES,
    TIME_ON_PAGE,
    INTERACTIONS,
    REFERRERS,
    SESSIONS,
    CATEGORIES,
    METADATA,
    KEYWORDS,
)


def _all_enabled() -> dict[str, bool]:
    return {name: True for name in ALL_CATEGORIES}


@dataclass(frozen=True)
class CollectionPreferences:
    """Resolved collection preferences.

    ``global_enabled`` is the master switch (``global`` in the stored
    document); ``enabled`` toggles each signal category.
    """

    global_enabled: bool = True
    enabled: Mapping[str, bool] = field(default_factory=_all_enabled)

    def is_enabled(self, category: str) -> bool:
        """Per-category toggle; unknown or unset categories default to on."""
        return bool(self.enabled.get(category, True))

    @classmethod
    def from_dict(cls, stored: Mapping[str, Any] | None) -> CollectionPreferences:
        """Overlay a stored preferences document on the defaults."""
        if stored is None:
            return cls()
        if not isinstance(stored, Mapping):
            raise PreferencesError(
                f"Preferences must be a JSON object, got {type(stored).__name__}"
            )

        global_enabled = stored.get("global", True)
        if not isinstance(global_enabled, bool):
            raise PreferencesError("Preference 'global' must be a boolean")

        raw_enabled = stored.get("enabled") or {}
        if not isinstance(raw_enabled, Mapping):
            raise PreferencesError("Preference 'enabled' must be a JSON object")

        enabled = _all_enabled()
        for name in ALL_CATEGORIES:
            value = raw_enabled.get(name)
            if isinstance(value, bool):
                enabled[name] = value
        return cls(global_enabled=global_enabled, enabled=enabled)

    def to_dict(self) -> dict:
        return {
            "global": self.global_enabled,
            "enabled": {name: self.is_enabled(name) for name in ALL_CATEGORIES},
        }
