"""Activity event model, parsing and preference filtering."""

from activity_collector.events.models import (
    ActivityEvent,
    ClickDescriptor,
    ClientMeta,
    DwellEvent,
    InteractionEvent,
    KeywordsEvent,
    LoadEvent,
    NavigationEvent,
    ScreenSize,
    SessionEndEvent,
    TitleEvent,
)
from activity_collector.events.parser import parse_event
from activity_collector.events.preferences import CollectionPreferences
from activity_collector.events.sanitizer import sanitize

__all__ = [
    "ActivityEvent",
    "ClickDescriptor",
    "ClientMeta",
    "DwellEvent",
    "InteractionEvent",
    "KeywordsEvent",
    "LoadEvent",
    "NavigationEvent",
    "ScreenSize",
    "SessionEndEvent",
    "TitleEvent",
    "parse_event",
    "CollectionPreferences",
    "sanitize",
]
