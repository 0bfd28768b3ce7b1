"""Tests for collection preferences."""

import pytest

from activity_collector.events.preferences import ALL_CATEGORIES, CollectionPreferences
from activity_collector.exceptions import PreferencesError


def test_defaults_enable_everything():
    prefs = CollectionPreferences()
    assert prefs.global_enabled is True
    assert all(prefs.is_enabled(name) for name in ALL_CATEGORIES)


def test_from_dict_none():
    assert CollectionPreferences.from_dict(None) == CollectionPreferences()


def test_from_dict_overlays_defaults():
    prefs = CollectionPreferences.from_dict({"global": True, "enabled": {"titles": False, "bogus": False}})
    assert prefs.is_enabled("titles") is False
    assert prefs.is_enabled("urls") is True
    assert "bogus" not in prefs.enabled


def test_from_dict_ignores_non_bool_toggles():
    prefs = CollectionPreferences.from_dict({"enabled": {"keywords": "no"}})
    assert prefs.is_enabled("keywords") is True


def test_from_dict_global_off():
    prefs = CollectionPreferences.from_dict({"global": False})
    assert prefs.global_enabled is False


def test_from_dict_rejects_non_object():
    with pytest.raises(PreferencesError):
        CollectionPreferences.from_dict(["global"])


def test_from_dict_rejects_bad_global():
    with pytest.raises(PreferencesError, match="global"):
        CollectionPreferences.from_dict({"global": "yes"})


def test_to_dict_round_trip():
    stored = {"global": False, "enabled": {name: name != "metadata" for name in ALL_CATEGORIES}}
    assert CollectionPreferences.from_dict(stored).to_dict() == stored
