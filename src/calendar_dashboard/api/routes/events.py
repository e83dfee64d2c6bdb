"""Event listing API.

GET /api/events returns the signed-in user's events narrowed by the same
filter parameters the dashboard accepts.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from calendar_dashboard.api.dependencies import (
    CalendarClientFactory,
    build_event_filter,
    get_calendar_client_factory,
)
from calendar_dashboard.auth.dependencies import get_session_provider, require_session
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import SessionData
from calendar_dashboard.calendar.filters import FilterMode
from calendar_dashboard.calendar.view import DashboardView

logger = logging.getLogger(__name__)

router = APIRouter()


class EventListResponse(BaseModel):
    """Filtered events."""

    mode: FilterMode
    anchor_date: str | None
    end_date: str | None
    count: int
    items: list[dict[str, Any]]


@router.get("", response_model=EventListResponse)
async def list_events(
    mode: str | None = None,
    date: str | None = None,
    end: str | None = None,
    session: SessionData = Depends(require_session),
    provider: SessionProvider = Depends(get_session_provider),
    client_factory: CalendarClientFactory = Depends(get_calendar_client_factory),
) -> EventListResponse:
    """List events from the primary calendar."""
    try:
        event_filter = build_event_filter(mode, date, end)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    view = DashboardView(event_filter=event_filter, tz=provider.settings.tz)

    if not await view.refresh(client_factory(session.provider_token)):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=view.notices[-1].message,
        )

    events = view.visible_events
    return EventListResponse(
        mode=event_filter.mode,
        anchor_date=event_filter.anchor_date.isoformat() if event_filter.anchor_date else None,
        end_date=event_filter.end_date.isoformat() if event_filter.end_date else None,
        count=len(events),
        items=[event.to_dict() for event in events],
    )
