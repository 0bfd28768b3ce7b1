"""Strip event fields according to the user's collection preferences."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any

from activity_collector.events.models import INTERACTION, ActivityEvent
from activity_collector.events.parser import parse_event
from activity_collector.events.preferences import (
    CATEGORIES,
    INTERACTIONS,
    KEYWORDS,
    METADATA,
    REFERRERS,
    SESSIONS,
    TIME_ON_PAGE,
    TITLES,
    URLS,
    CollectionPreferences,
)

logger = logging.getLogger(__name__)

# Event fields owned by each preference category.
CATEGORY_FIELDS: dict[str, tuple[str, ...]] = {
    URLS: ("url_hash",),
    TITLES: ("title",),
    TIME_ON_PAGE: ("duration_ms",),
    INTERACTIONS: ("interaction_type", "descriptor"),
    KEYWORDS: ("keywords",),
    CATEGORIES: ("category",),
    SESSIONS: ("session_id",),
    METADATA: ("meta",),
    REFERRERS: ("referrer",),
}

# Variants whose whole event belongs to a category.
GATED_TYPES: dict[str, str] = {
    INTERACTION: INTERACTIONS,
}


def sanitize(event: Any, prefs: CollectionPreferences) -> ActivityEvent | None:
    """Return a copy of ``event`` without the fields of disabled categories.

    ``event`` may be a typed event or a raw mapping. Returns None when the
    event cannot be typed, when its whole variant is disabled, or when
    nothing but ``ts``/``tabId`` would remain (the variant tag counts as
    content). The global switch is not checked here.
    """
    parsed = parse_event(event)
    if parsed is None:
        return None

    gate = GATED_TYPES.get(parsed.type)
    if gate is not None and not prefs.is_enabled(gate):
        logger.debug("Dropping %s event: category %s disabled", parsed.type, gate)
        return None

    present = {f.name for f in fields(parsed)}
    changes: dict[str, None] = {}
    for category, names in CATEGORY_FIELDS.items():
        if prefs.is_enabled(category):
            continue
        for name in names:
            if name in present and getattr(parsed, name) is not None:
                changes[name] = None

    sanitized = replace(parsed, **changes) if changes else parsed
    if not sanitized.has_payload():
        logger.debug("Dropping %s event with no remaining payload", sanitized.type)
        return None
    return sanitized
