"""Calendar integration module.

Fetches events from the user's primary Google Calendar and narrows them by
date for the dashboard.

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference

## Event Processing

1. Derive the listing window from the filter
2. Fetch events from the primary calendar (one request)
3. Keep the list per session; a failed fetch shows the previous one
4. Filter by resolved date
5. Render as table rows
"""

from calendar_dashboard.calendar.cache import EventCache
from calendar_dashboard.calendar.client import GoogleCalendarClient
from calendar_dashboard.calendar.events import CalendarEvent, EventTime
from calendar_dashboard.calendar.filters import (
    EventFilter,
    FilterMode,
    filter_events,
    time_window,
)
from calendar_dashboard.calendar.view import DashboardView, Notice, NoticeLevel, ViewStatus

__all__ = [
    "EventCache",
    "GoogleCalendarClient",
    "CalendarEvent",
    "EventTime",
    "EventFilter",
    "FilterMode",
    "filter_events",
    "time_window",
    "DashboardView",
    "Notice",
    "NoticeLevel",
    "ViewStatus",
]
