"""Date filtering for calendar events.

## Modes

- ``all``: every fetched event
- ``single``: events whose resolved date falls on the anchor day
- ``range``: events whose resolved day lies between the anchor and end days,
  both inclusive; either bound may be left open

Days are compared in the display timezone. An event without any start value
resolves to "now", so it moves in and out of date filters as time passes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field, model_validator

from calendar_dashboard.calendar.events import CalendarEvent


class FilterMode(str, Enum):
    """How the dashboard narrows the event list."""

    ALL = "all"
    SINGLE = "single"
    RANGE = "range"


class EventFilter(BaseModel):
    """Filter state chosen by the user."""

    mode: FilterMode = Field(default=FilterMode.ALL, description="Filter mode")
    anchor_date: date | None = Field(
        default=None, description="Selected day, or start of the range"
    )
    end_date: date | None = Field(default=None, description="End of the range")

    @model_validator(mode="after")
    def check_dates(self) -> EventFilter:
        if self.mode == FilterMode.SINGLE and self.anchor_date is None:
            raise ValueError("single-date filter needs a date")
        if (
            self.mode == FilterMode.RANGE
            and self.anchor_date is not None
            and self.end_date is not None
            and self.end_date < self.anchor_date
        ):
            raise ValueError("end date is before start date")
        return self

    def apply(
        self,
        events: Iterable[CalendarEvent],
        now: datetime | None = None,
        tz: tzinfo = timezone.utc,
    ) -> list[CalendarEvent]:
        return filter_events(events, self.mode, self.anchor_date, self.end_date, now=now, tz=tz)


def _event_day(event: CalendarEvent, now: datetime, tz: tzinfo) -> date:
    return event.resolved_date(now=now, tz=tz).astimezone(tz).date()


def filter_events(
    events: Iterable[CalendarEvent],
    mode: FilterMode | str,
    anchor_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> list[CalendarEvent]:
    """Filter events by date.

    Args:
        events: Fetched events (not modified)
        mode: Filter mode
        anchor_date: Day for ``single``, lower bound for ``range``
        end_date: Upper bound for ``range``
        now: Fallback for events without a start (default: current time)
        tz: Timezone that defines day boundaries

    Returns:
        New list with the matching events, in input order
    """
    mode = FilterMode(mode)
    now = now or datetime.now(timezone.utc)
    events = list(events)

    if mode == FilterMode.ALL:
        return events

    if mode == FilterMode.SINGLE:
        if anchor_date is None:
            return events
        return [e for e in events if _event_day(e, now, tz) == anchor_date]

    filtered = []
    for event in events:
        day = _event_day(event, now, tz)
        if anchor_date is not None and day < anchor_date:
            continue
        if end_date is not None and day > end_date:
            continue
        filtered.append(event)
    return filtered


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def time_window(
    event_filter: EventFilter,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> tuple[datetime | None, datetime | None]:
    """Listing window to request for a filter.

    Returns:
        ``(time_min, time_max)``; None means unbounded on that side
    """
    now = now or datetime.now(timezone.utc)

    if event_filter.mode == FilterMode.SINGLE and event_filter.anchor_date is not None:
        day_start = start_of_day(event_filter.anchor_date, tz)
        return day_start, day_start + timedelta(days=1)

    if event_filter.mode == FilterMode.RANGE:
        # Without a start date the listing begins at the oldest event. Only
        # one page is fetched, so a long history can push the requested days
        # past calendar_max_results; the client logs a warning when it does.
        time_min = None
        time_max = None
        if event_filter.anchor_date is not None:
            time_min = start_of_day(event_filter.anchor_date, tz)
        if event_filter.end_date is not None:
            time_max = start_of_day(event_filter.end_date + timedelta(days=1), tz)
        return time_min, time_max

    return now, None
