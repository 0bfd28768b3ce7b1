"""Tests for event model serialization."""

import dataclasses

import pytest

from activity_collector.events.models import (
    EVENT_CLASSES,
    ClickDescriptor,
    InteractionEvent,
    SessionEndEvent,
)


def test_every_variant_registered():
    assert set(EVENT_CLASSES) == {
        "navigation", "load", "title", "dwell", "interaction", "keywords", "session_end",
    }


def test_events_are_immutable():
    event = SessionEndEvent(ts=5000, tab_id=5, session_id="5-1000", duration_ms=4000)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.duration_ms = 1


def test_to_dict_uses_wire_keys_and_omits_unset():
    event = InteractionEvent(
        ts=1,
        tab_id=9,
        interaction_type="click",
        descriptor=ClickDescriptor(tag="BUTTON", classes=("cta",)),
    )
    assert event.to_dict() == {
        "type": "interaction",
        "ts": 1,
        "tabId": 9,
        "interactionType": "click",
        "descriptor": {"tag": "BUTTON", "classes": ["cta"]},
    }


def test_session_end_shape():
    event = SessionEndEvent(ts=5000, tab_id=5, session_id="5-1000", duration_ms=4000)
    assert event.to_dict() == {
        "type": "session_end",
        "ts": 5000,
        "tabId": 5,
        "sessionId": "5-1000",
        "duration_ms": 4000,
    }
