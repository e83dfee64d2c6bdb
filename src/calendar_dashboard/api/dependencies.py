"""FastAPI dependencies for the dashboard routes."""

from __future__ import annotations

from datetime import date
from typing import Callable

from fastapi import Request
from pydantic import ValidationError

from calendar_dashboard.calendar.cache import EventCache
from calendar_dashboard.calendar.client import GoogleCalendarClient
from calendar_dashboard.calendar.filters import EventFilter

CalendarClientFactory = Callable[[str], GoogleCalendarClient]


def get_calendar_client_factory(request: Request) -> CalendarClientFactory:
    """Factory that builds a calendar client from a bearer token."""
    return request.app.state.calendar_client_factory


def get_event_cache(request: Request) -> EventCache:
    return request.app.state.event_cache


def _parse_day(value: str | None, label: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid {label}: {value}") from e


def build_event_filter(
    mode: str | None = None,
    anchor: str | None = None,
    end: str | None = None,
) -> EventFilter:
    """Build filter state from raw query parameters.

    Empty strings (as sent by an untouched date input) count as unset.

    Raises:
        ValueError: With a user-facing message if the parameters are invalid
    """
    try:
        return EventFilter(
            mode=mode or "all",
            anchor_date=_parse_day(anchor, "start date"),
            end_date=_parse_day(end, "end date"),
        )
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ValueError(messages) from e
