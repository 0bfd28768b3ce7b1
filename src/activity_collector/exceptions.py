"""Unified exception hierarchy for activity-collector."""


class ActivityCollectorError(Exception):
    """Base exception for all activity-collector errors."""


# Configuration
class ConfigError(ActivityCollectorError):
    """Invalid collector configuration value."""


class PreferencesError(ActivityCollectorError):
    """Collection preferences document could not be resolved."""


# Event store
class EventStoreError(ActivityCollectorError):
    """Base exception for event log operations."""


class StorageReadError(EventStoreError):
    """Failed to read the persisted event log."""


class StorageWriteError(EventStoreError):
    """Failed to write the persisted event log."""


# Sessions
class SessionError(ActivityCollectorError):
    """Invalid session tracker operation."""


# Keywords
class KeywordExtractionError(ActivityCollectorError):
    """Failed to sample or extract page keywords."""


# Aggregation
class AggregationError(ActivityCollectorError):
    """Failed to aggregate the event log."""


# Export
class ExportError(ActivityCollectorError):
    """Failed to assemble an exported dataset."""
