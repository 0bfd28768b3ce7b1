"""Parse raw event mappings into typed activity events."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

from activity_collector.events.models import (
    CLICK,
    EVENT_CLASSES,
    SCROLL,
    WIRE_KEYS,
    ActivityEvent,
    ClickDescriptor,
    ClientMeta,
    ScreenSize,
)

logger = logging.getLogger(__name__)

MAX_DESCRIPTOR_CLASSES = 3


def parse_event(raw: Any, require_ts: bool = True) -> ActivityEvent | None:
    """Decode one raw event; returns None for events that cannot be typed.

    Decoding is permissive: a field with the wrong type is dropped on its
    own, and keys that do not belong to the event's variant are ignored.
    Only a missing/unknown ``type`` or, when ``require_ts`` is set, a
    missing ``ts`` discards the event. Otherwise a missing ``ts`` reads as 0.
    """
    if isinstance(raw, ActivityEvent):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug("Discarding non-mapping event: %r", type(raw).__name__)
        return None

    event_type = raw.get("type")
    cls = EVENT_CLASSES.get(event_type) if isinstance(event_type, str) else None
    if cls is None:
        logger.debug("Discarding event with unknown type: %r", event_type)
        return None

    ts = _as_int(raw.get("ts"))
    if ts is None and not require_ts:
        ts = 0
    if ts is None:
        logger.debug("Discarding %s event without timestamp", cls.type)
        return None

    kwargs: dict[str, Any] = {"ts": ts}
    for f in fields(cls):
        if f.name == "ts":
            continue
        coerce = _COERCERS[f.name]
        value = coerce(raw.get(WIRE_KEYS.get(f.name, f.name)))
        if value is not None:
            kwargs[f.name] = value

    # Descriptors are only kept for clicks.
    if kwargs.get("interaction_type") != CLICK:
        kwargs.pop("descriptor", None)

    return cls(**kwargs)


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _as_non_negative_int(value: Any) -> int | None:
    if isinstance(value, float) and math.isfinite(value) and value >= 0:
        return int(round(value))
    number = _as_int(value)
    if number is None or number < 0:
        return None
    return number


def _as_percent(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return max(0, min(100, int(round(value))))


def _as_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _as_interaction_type(value: Any) -> str | None:
    return value if value in (CLICK, SCROLL) else None


def _as_descriptor(value: Any) -> ClickDescriptor | None:
    if not isinstance(value, Mapping):
        return None
    tag = _as_str(value.get("tag"))
    if tag is None:
        return None
    raw_classes = value.get("classes")
    classes: tuple[str, ...] = ()
    if isinstance(raw_classes, (list, tuple)):
        classes = tuple(c for c in raw_classes if isinstance(c, str) and c)[:MAX_DESCRIPTOR_CLASSES]
    return ClickDescriptor(tag=tag, classes=classes)


def _as_keywords(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, (list, tuple)):
        return None
    keywords = tuple(k for k in value if isinstance(k, str) and k)
    return keywords or None


def _as_meta(value: Any) -> ClientMeta | None:
    if isinstance(value, ClientMeta):
        return value
    if not isinstance(value, Mapping):
        return None
    screen = None
    raw_screen = value.get("screen")
    if isinstance(raw_screen, Mapping):
        width = _as_non_negative_int(raw_screen.get("width"))
        height = _as_non_negative_int(raw_screen.get("height"))
        if width is not None and height is not None:
            screen = ScreenSize(width=width, height=height)
    meta = ClientMeta(
        language=_as_str(value.get("language")),
        screen=screen,
        os=_as_str(value.get("os")),
    )
    if meta.language is None and meta.screen is None and meta.os is None:
        return None
    return meta


_COERCERS = {
    "tab_id": _as_int,
    "domain": _as_str,
    "url_hash": _as_str,
    "session_id": _as_str,
    "category": _as_str,
    "meta": _as_meta,
    "title": _as_str,
    "referrer": _as_str,
    "duration_ms": _as_non_negative_int,
    "interaction_type": _as_interaction_type,
    "descriptor": _as_descriptor,
    "max_scroll_percent": _as_percent,
    "keywords": _as_keywords,
}
