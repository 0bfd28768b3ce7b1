"""Background collector wiring browser hooks to the event log."""

from activity_collector.collector.collector import ActivityCollector
from activity_collector.collector.urls import classify_url, extract_domain, hash_url

__all__ = ["ActivityCollector", "classify_url", "extract_domain", "hash_url"]
