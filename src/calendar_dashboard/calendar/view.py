"""Dashboard view state.

A `DashboardView` lives for one rendering of the dashboard. It owns the
fetched event list, the filter state and any notifications raised while
loading. The dashboard route seeds it with the session's previous list from
`EventCache`; views never share state directly.

States: ``loading`` until the first fetch finishes, then ``idle`` or
``error``. A failed fetch keeps whatever list the view already had.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Callable

from calendar_dashboard.calendar.client import GoogleCalendarClient
from calendar_dashboard.calendar.events import CalendarEvent
from calendar_dashboard.calendar.filters import EventFilter, time_window
from calendar_dashboard.exceptions import CalendarFetchError

logger = logging.getLogger(__name__)


class ViewStatus(str, Enum):
    LOADING = "loading"
    IDLE = "idle"
    ERROR = "error"


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """Transient message shown to the user."""

    message: str
    level: NoticeLevel = NoticeLevel.INFO


@dataclass
class DashboardView:
    """Event list and filter state for one dashboard rendering."""

    event_filter: EventFilter = field(default_factory=EventFilter)
    tz: tzinfo = timezone.utc
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    events: list[CalendarEvent] = field(default_factory=list)
    status: ViewStatus = ViewStatus.LOADING
    notices: list[Notice] = field(default_factory=list)

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        self.notices.append(Notice(message=message, level=level))

    async def refresh(self, client: GoogleCalendarClient) -> bool:
        """Fetch events for the current filter.

        Returns:
            True if the list was replaced, False if the fetch failed
        """
        time_min, time_max = time_window(self.event_filter, now=self.clock(), tz=self.tz)

        try:
            fetched = await client.list_events(time_min=time_min, time_max=time_max)
        except CalendarFetchError as e:
            logger.warning(f"Keeping {len(self.events)} previously loaded events: {e}")
            self.status = ViewStatus.ERROR
            self.notify(f"Failed to fetch events: {e}", NoticeLevel.ERROR)
            return False

        self.events = fetched
        self.status = ViewStatus.IDLE
        return True

    def set_filter(self, event_filter: EventFilter) -> None:
        self.event_filter = event_filter

    @property
    def visible_events(self) -> list[CalendarEvent]:
        """The fetched list narrowed by the current filter."""
        return self.event_filter.apply(self.events, now=self.clock(), tz=self.tz)
