"""Data models for the activity event log."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar

NAVIGATION = "navigation"
LOAD = "load"
TITLE = "title"
DWELL = "dwell"
INTERACTION = "interaction"
KEYWORDS = "keywords"
SESSION_END = "session_end"

CLICK = "click"
SCROLL = "scroll"

UNKNOWN_DOMAIN = "unknown"

# Python field name -> key used in the persisted JSON log.
WIRE_KEYS = {
    "tab_id": "tabId",
    "session_id": "sessionId",
    "interaction_type": "interactionType",
    "max_scroll_percent": "maxScrollPercent",
}

# Envelope fields that never count as information on their own.
_NON_PAYLOAD_FIELDS = {"ts", "tab_id"}


@dataclass(frozen=True)
class ScreenSize:
    width: int
    height: int


@dataclass(frozen=True)
class ClientMeta:
    """Coarse client metadata attached to page events."""

    language: str | None = None
    screen: ScreenSize | None = None
    os: str | None = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.language is not None:
            out["language"] = self.language
        if self.screen is not None:
            out["screen"] = {"width": self.screen.width, "height": self.screen.height}
        if self.os is not None:
            out["os"] = self.os
        return out


@dataclass(frozen=True)
class ClickDescriptor:
    """Tag name and up to three CSS classes of a clicked element."""

    tag: str
    classes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"tag": self.tag, "classes": list(self.classes)}


@dataclass(frozen=True)
class ActivityEvent:
    """Fields shared by every event variant.

    Subclasses set ``type`` and add the fields relevant to their signal.
    Unset optional fields are ``None`` and are omitted on serialization.
    """

    type: ClassVar[str] = ""

    ts: int
    tab_id: int | None = None
    domain: str | None = None
    url_hash: str | None = None
    session_id: str | None = None
    category: str | None = None
    meta: ClientMeta | None = None

    def payload_fields(self) -> list[str]:
        """Names of set fields that carry information beyond ts/tabId."""
        return [
            f.name
            for f in fields(self)
            if f.name not in _NON_PAYLOAD_FIELDS and getattr(self, f.name) is not None
        ]

    def has_payload(self) -> bool:
        """Whether anything beyond ts/tabId remains; a variant tag counts."""
        return bool(self.type) or bool(self.payload_fields())

    def to_dict(self) -> dict:
        """Serialize to the persisted JSON shape."""
        out: dict[str, Any] = {"type": self.type}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, (ClientMeta, ClickDescriptor)):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = list(value)
            out[WIRE_KEYS.get(f.name, f.name)] = value
        return out


@dataclass(frozen=True)
class NavigationEvent(ActivityEvent):
    type: ClassVar[str] = NAVIGATION

    title: str | None = None
    referrer: str | None = None


@dataclass(frozen=True)
class LoadEvent(ActivityEvent):
    type: ClassVar[str] = LOAD


@dataclass(frozen=True)
class TitleEvent(ActivityEvent):
    type: ClassVar[str] = TITLE

    title: str | None = None


@dataclass(frozen=True)
class DwellEvent(ActivityEvent):
    type: ClassVar[str] = DWELL

    duration_ms: int | None = None


@dataclass(frozen=True)
class InteractionEvent(ActivityEvent):
    type: ClassVar[str] = INTERACTION

    interaction_type: str | None = None  # "click" | "scroll"
    descriptor: ClickDescriptor | None = None
    max_scroll_percent: int | None = None


@dataclass(frozen=True)
class KeywordsEvent(ActivityEvent):
    type: ClassVar[str] = KEYWORDS

    keywords: tuple[str, ...] | None = None


@dataclass(frozen=True)
class SessionEndEvent(ActivityEvent):
    type: ClassVar[str] = SESSION_END

    duration_ms: int | None = None


EVENT_CLASSES: dict[str, type[ActivityEvent]] = {
    cls.type: cls
    for cls in (
        NavigationEvent,
        LoadEvent,
        TitleEvent,
        DwellEvent,
        InteractionEvent,
        KeywordsEvent,
        SessionEndEvent,
    )
}
