"""Google Calendar API client.

Lists events from the signed-in user's primary calendar with a single
``events.list`` request.

## API Documentation

https://developers.google.com/calendar/api/v3/reference/events/list

## Authentication

The Google access token obtained at sign-in is sent unmodified as a bearer
token. An expired or revoked token surfaces as a 401 ``CalendarFetchError``.

## Request

```
GET {base}/calendars/primary/events
    ?orderBy=startTime&singleEvents=true
    &timeMin=...&timeMax=...&maxResults=250
    &fields=items(id,summary,location,start,end),nextPageToken
Authorization: Bearer <token>
```
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from calendar_dashboard.calendar.events import CalendarEvent
from calendar_dashboard.config import Settings, get_settings
from calendar_dashboard.exceptions import CalendarFetchError

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR = "primary"
EVENT_FIELDS = "items(id,summary,location,start,end),nextPageToken"


class GoogleCalendarClient:
    """Client for the Google Calendar events listing.

    Example:
        ```python
        client = GoogleCalendarClient(session.provider_token)
        events = await client.list_events(time_min=now)
        ```
    """

    def __init__(
        self,
        access_token: str,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            access_token: Google OAuth access token
            settings: Settings for base URL, page size and timeout
            transport: httpx transport override (tests use httpx.MockTransport)
        """
        settings = settings or get_settings()

        self.access_token = access_token
        self.base_url = settings.calendar_api_base_url.rstrip("/")
        self.max_results = settings.calendar_max_results
        self.timeout = settings.http_timeout_seconds
        self._transport = transport

    def _params(
        self,
        time_min: datetime | None,
        time_max: datetime | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "orderBy": "startTime",
            "singleEvents": "true",  # Expand recurring events
            "maxResults": self.max_results,
            "fields": EVENT_FIELDS,
        }
        if time_min is not None:
            params["timeMin"] = time_min.isoformat()
        if time_max is not None:
            params["timeMax"] = time_max.isoformat()
        return params

    async def list_events(
        self,
        time_min: datetime | None = None,
        time_max: datetime | None = None,
        calendar_id: str = PRIMARY_CALENDAR,
    ) -> list[CalendarEvent]:
        """List events from a calendar.

        Args:
            time_min: Lower bound on event end time (exclusive)
            time_max: Upper bound on event start time (exclusive)
            calendar_id: Calendar ID (default: the primary calendar)

        Returns:
            Events ordered by start time

        Raises:
            CalendarFetchError: On transport failure or non-2xx status
        """
        url = f"{self.base_url}/calendars/{calendar_id}/events"

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.get(
                    url,
                    params=self._params(time_min, time_max),
                    headers={"Authorization": f"Bearer {self.access_token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Calendar request failed: {e}")
            raise CalendarFetchError(f"Calendar request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Calendar request failed with HTTP {response.status_code}: {response.text}"
            )
            raise CalendarFetchError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            events = [CalendarEvent.from_api(item) for item in data.get("items") or []]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Unreadable calendar response: {e}")
            raise CalendarFetchError(
                "Unreadable calendar response", status_code=response.status_code
            ) from e

        if data.get("nextPageToken"):
            # Only the first page is read
            logger.warning(
                f"Calendar {calendar_id} has more than {len(events)} events in the "
                "requested window; later ones are not shown"
            )

        logger.debug(f"Fetched {len(events)} events from calendar {calendar_id}")
        return events
