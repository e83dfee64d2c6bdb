"""Last successfully fetched events, per session.

Each dashboard request builds a fresh `DashboardView`. The cache hands that
view the list from the session's previous successful fetch, so a failed
fetch still shows what the user saw before.

Entries expire with the session they belong to and are dropped on sign-out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from calendar_dashboard.calendar.events import CalendarEvent

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    events: list[CalendarEvent]
    expires_at: datetime


class EventCache:
    """In-memory event lists keyed by session id."""

    def __init__(self):
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self) -> None:
        now = datetime.now(timezone.utc)
        for session_id in [s for s, e in self._entries.items() if e.expires_at < now]:
            del self._entries[session_id]

    def get(self, session_id: str) -> list[CalendarEvent]:
        """Events from the last successful fetch, or an empty list."""
        entry = self._entries.get(session_id)
        if entry is None or entry.expires_at < datetime.now(timezone.utc):
            return []
        return list(entry.events)

    def put(self, session_id: str, events: list[CalendarEvent], expires_at: datetime) -> None:
        self._prune()
        self._entries[session_id] = _Entry(events=list(events), expires_at=expires_at)

    def discard(self, session_id: str) -> None:
        if self._entries.pop(session_id, None) is not None:
            logger.debug(f"Dropped cached events for session {session_id}")
