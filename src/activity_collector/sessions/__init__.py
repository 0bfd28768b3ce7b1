"""Per-tab browsing session tracking."""

from activity_collector.sessions.tracker import Session, SessionTracker

__all__ = ["Session", "SessionTracker"]
