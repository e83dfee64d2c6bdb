"""Calendar event records.

Events are parsed from the Google Calendar v3 ``events.list`` payload and are
never modified afterwards.

Each of ``start``/``end`` is either a precise timestamp (``dateTime``) or an
all-day date (``date``); Google sends one or the other. An event with neither
is kept, and its resolved date falls back to the current instant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any

logger = logging.getLogger(__name__)

UNTITLED = "(No title)"


def parse_datetime(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as sent by Google."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class EventTime:
    """Start or end of an event."""

    date_time: datetime | None = None
    date: date | None = None
    time_zone: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> EventTime:
        data = data or {}
        date_time = data.get("dateTime")
        day = data.get("date")
        return cls(
            date_time=parse_datetime(date_time) if date_time else None,
            date=date.fromisoformat(day) if day else None,
            time_zone=data.get("timeZone"),
        )

    @property
    def is_known(self) -> bool:
        return self.date_time is not None or self.date is not None

    @property
    def is_all_day(self) -> bool:
        return self.date_time is None and self.date is not None

    def resolve(self, tz: tzinfo = timezone.utc) -> datetime | None:
        """Timestamp for this value, all-day dates at midnight in ``tz``."""
        if self.date_time is not None:
            return self.date_time
        if self.date is not None:
            return datetime.combine(self.date, time.min, tzinfo=tz)
        return None

    def to_api(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.date_time is not None:
            body["dateTime"] = self.date_time.isoformat()
        if self.date is not None:
            body["date"] = self.date.isoformat()
        if self.time_zone is not None:
            body["timeZone"] = self.time_zone
        return body


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event."""

    id: str
    summary: str | None = None
    location: str | None = None
    start: EventTime = EventTime()
    end: EventTime = EventTime()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CalendarEvent:
        """Create from Google Calendar API response."""
        return cls(
            id=data["id"],
            summary=data.get("summary"),
            location=data.get("location"),
            start=EventTime.from_api(data.get("start")),
            end=EventTime.from_api(data.get("end")),
        )

    @property
    def title(self) -> str:
        return self.summary or UNTITLED

    @property
    def is_all_day(self) -> bool:
        return self.start.is_all_day

    def resolved_date(self, now: datetime | None = None, tz: tzinfo = timezone.utc) -> datetime:
        """Date used for filtering.

        Prefers the start timestamp, then the start date, then ``now``.
        """
        resolved = self.start.resolve(tz)
        if resolved is None:
            logger.debug(f"Event {self.id} has no start; resolving to now")
            resolved = now or datetime.now(timezone.utc)
        return resolved

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict in the API's own shape."""
        return {
            "id": self.id,
            "summary": self.summary,
            "location": self.location,
            "start": self.start.to_api(),
            "end": self.end.to_api(),
        }
