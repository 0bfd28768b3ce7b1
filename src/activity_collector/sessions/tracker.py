"""In-memory per-tab session registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from activity_collector.events.models import SessionEndEvent
from activity_collector.exceptions import SessionError

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One continuous tracked period of a browser tab."""

    session_id: str
    tab_id: int
    start_ts: int
    last_active_ts: int
    total_time: int = 0  # informational, ms between start and last activity


class SessionTracker:
    """Track sessions per tab id.

    A session starts on the first top-level navigation of a tab, is refreshed
    by later navigations in that tab, and ends when the tab is removed.
    State is transient: nothing here is persisted.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, tab_id: object) -> bool:
        return tab_id in self._sessions

    def touch(self, tab_id: int, now: int) -> Session:
        """Record a top-level navigation, starting a session if needed."""
        _check_tab_id(tab_id)
        session = self._sessions.get(tab_id)
        if session is None:
            session = Session(
                session_id=f"{tab_id}-{now}",
                tab_id=tab_id,
                start_ts=now,
                last_active_ts=now,
            )
            self._sessions[tab_id] = session
            logger.info("Session %s started", session.session_id)
        else:
            session.last_active_ts = now
            session.total_time = max(0, now - session.start_ts)
        return session

    def end(self, tab_id: int, now: int) -> SessionEndEvent | None:
        """Remove the tab's session and return its ``session_end`` event.

        Returns None when the tab has no active session.
        """
        _check_tab_id(tab_id)
        session = self._sessions.pop(tab_id, None)
        if session is None:
            return None
        duration = max(0, now - session.start_ts)
        logger.info("Session %s ended after %d ms", session.session_id, duration)
        return SessionEndEvent(
            ts=now,
            tab_id=tab_id,
            session_id=session.session_id,
            duration_ms=duration,
        )

    def get(self, tab_id: int) -> Session | None:
        return self._sessions.get(tab_id)

    def session_id(self, tab_id: int | None) -> str | None:
        """Current session id of a tab, if any."""
        if tab_id is None:
            return None
        session = self._sessions.get(tab_id)
        return session.session_id if session else None

    def active_tabs(self) -> list[int]:
        return sorted(self._sessions)


def _check_tab_id(tab_id: object) -> None:
    if isinstance(tab_id, bool) or not isinstance(tab_id, int):
        raise SessionError(f"tab_id must be an integer, got {tab_id!r}")
