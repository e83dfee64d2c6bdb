"""Tests for the calendar client and the dashboard view."""

import logging
from datetime import date, datetime, timezone

import pytest

from calendar_dashboard.calendar.client import EVENT_FIELDS
from calendar_dashboard.calendar.events import CalendarEvent
from calendar_dashboard.calendar.filters import EventFilter, FilterMode
from calendar_dashboard.calendar.view import DashboardView, NoticeLevel, ViewStatus
from calendar_dashboard.exceptions import CalendarFetchError


class TestGoogleCalendarClient:
    """Tests for GoogleCalendarClient.list_events."""

    @pytest.mark.asyncio
    async def test_request_shape(self, calendar_client, fake_google):
        """Test the listing request carries the expected query and bearer token."""
        time_min = datetime(2024, 1, 6, tzinfo=timezone.utc)
        time_max = datetime(2024, 1, 13, tzinfo=timezone.utc)

        await calendar_client.list_events(time_min=time_min, time_max=time_max)

        assert len(fake_google.calendar_requests) == 1
        request = fake_google.calendar_requests[0]
        assert request.method == "GET"
        assert request.url.path == "/calendar/v3/calendars/primary/events"
        assert request.headers["Authorization"] == "Bearer test-access-token"

        params = request.url.params
        assert params["orderBy"] == "startTime"
        assert params["singleEvents"] == "true"
        assert params["timeMin"] == "2024-01-06T00:00:00+00:00"
        assert params["timeMax"] == "2024-01-13T00:00:00+00:00"
        assert params["fields"] == EVENT_FIELDS
        assert params["maxResults"] == "250"

    @pytest.mark.asyncio
    async def test_open_window_omits_bounds(self, calendar_client, fake_google):
        await calendar_client.list_events()

        params = fake_google.calendar_requests[0].url.params
        assert "timeMin" not in params
        assert "timeMax" not in params

    @pytest.mark.asyncio
    async def test_parses_items(self, calendar_client, fake_google, sample_api_events):
        fake_google.events = sample_api_events

        events = await calendar_client.list_events()

        assert [e.id for e in events] == ["evt-1", "evt-2", "evt-3", "evt-4", "evt-5"]
        assert events[0].summary == "Dentist"
        assert events[2].is_all_day is True

    @pytest.mark.asyncio
    async def test_missing_items_is_empty(self, calendar_client, fake_google):
        fake_google.events = None

        assert await calendar_client.list_events() == []

    @pytest.mark.asyncio
    async def test_truncated_listing_is_logged(
        self, calendar_client, fake_google, sample_api_events, caplog
    ):
        fake_google.events = sample_api_events
        fake_google.next_page_token = "page-2"

        with caplog.at_level(logging.WARNING, logger="calendar_dashboard.calendar.client"):
            events = await calendar_client.list_events()

        assert len(events) == 5
        assert "later ones are not shown" in caplog.text
        assert len(fake_google.calendar_requests) == 1

    @pytest.mark.asyncio
    async def test_http_error(self, calendar_client, fake_google):
        """Test that a 401 surfaces as CalendarFetchError with the status."""
        fake_google.calendar_status = 401

        with pytest.raises(CalendarFetchError) as exc_info:
            await calendar_client.list_events()

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self, calendar_client, fake_google):
        fake_google.fail_transport = True

        with pytest.raises(CalendarFetchError) as exc_info:
            await calendar_client.list_events()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_single_request_no_retry(self, calendar_client, fake_google):
        fake_google.calendar_status = 503

        with pytest.raises(CalendarFetchError):
            await calendar_client.list_events()

        assert len(fake_google.calendar_requests) == 1


class TestDashboardView:
    """Tests for DashboardView state handling."""

    @pytest.mark.asyncio
    async def test_refresh_replaces_events(self, calendar_client, fake_google, sample_api_events):
        fake_google.events = sample_api_events
        view = DashboardView()
        assert view.status == ViewStatus.LOADING

        assert await view.refresh(calendar_client) is True

        assert len(view.events) == 5
        assert view.status == ViewStatus.IDLE
        assert view.notices == []

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_list(
        self, calendar_client, fake_google, sample_api_events
    ):
        fake_google.events = sample_api_events
        view = DashboardView()
        await view.refresh(calendar_client)
        before = list(view.events)

        fake_google.calendar_status = 401
        assert await view.refresh(calendar_client) is False

        assert view.events == before
        assert view.status == ViewStatus.ERROR
        assert view.notices[-1].level == NoticeLevel.ERROR
        assert "Failed to fetch events" in view.notices[-1].message

    @pytest.mark.asyncio
    async def test_failed_first_refresh_leaves_empty_list(self, calendar_client, fake_google):
        fake_google.calendar_status = 401
        view = DashboardView()

        await view.refresh(calendar_client)

        assert view.events == []
        assert view.visible_events == []
        assert len(view.notices) == 1

    @pytest.mark.asyncio
    async def test_refresh_uses_filter_window(self, calendar_client, fake_google, fixed_now):
        view = DashboardView(
            event_filter=EventFilter(mode=FilterMode.SINGLE, anchor_date=date(2024, 1, 5)),
            clock=lambda: fixed_now,
        )

        await view.refresh(calendar_client)

        params = fake_google.calendar_requests[0].url.params
        assert params["timeMin"] == "2024-01-05T00:00:00+00:00"
        assert params["timeMax"] == "2024-01-06T00:00:00+00:00"

    def test_visible_events_is_pure(self, sample_events, fixed_now):
        view = DashboardView(
            event_filter=EventFilter(
                mode=FilterMode.RANGE, anchor_date=date(2024, 1, 6), end_date=date(2024, 1, 12)
            ),
            clock=lambda: fixed_now,
            events=list(sample_events),
        )

        assert [e.id for e in view.visible_events] == ["evt-2", "evt-3"]
        assert view.events == sample_events

        view.set_filter(EventFilter())
        assert view.visible_events == sample_events

    def test_views_do_not_share_state(self, sample_events):
        first = DashboardView(events=list(sample_events))
        second = DashboardView()
        first.notify("hello")

        assert second.events == []
        assert second.notices == []
        assert isinstance(first.events[0], CalendarEvent)
