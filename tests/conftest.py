"""Pytest fixtures for calendar dashboard tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google OAuth, Google Calendar)
2. Isolated test environment with controlled configuration
3. Sessions can be created without going through Google
"""

import os
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")

from fastapi.testclient import TestClient

from calendar_dashboard.api.app import create_app
from calendar_dashboard.auth.google import GoogleOAuth
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import create_session_token
from calendar_dashboard.calendar.client import GoogleCalendarClient
from calendar_dashboard.calendar.events import CalendarEvent
from calendar_dashboard.config import Settings, get_settings


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


# =============================================================================
# Fake Google
# =============================================================================


class FakeGoogle:
    """In-process stand-in for the Google OAuth and Calendar endpoints.

    Records every request; responses are controlled through attributes.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.events: list[dict[str, Any]] = []
        self.calendar_status = 200
        self.token_status = 200
        self.revoke_status = 200
        self.fail_transport = False
        self.next_page_token: str | None = None
        self.user = {
            "id": "google-user-1",
            "email": "test@example.com",
            "name": "Test User",
            "verified_email": True,
        }

    @property
    def calendar_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/calendar/v3/")]

    @property
    def revoke_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/revoke"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(
                200,
                json={
                    "access_token": "test-access-token",
                    "refresh_token": "test-refresh-token",
                    "expires_in": 3599,
                    "token_type": "Bearer",
                    "scope": "https://www.googleapis.com/auth/calendar.readonly",
                },
            )
        if path == "/oauth2/v2/userinfo":
            return httpx.Response(200, json=self.user)
        if path == "/revoke":
            return httpx.Response(self.revoke_status, json={})
        if path.startswith("/calendar/v3/calendars/"):
            if self.calendar_status != 200:
                return httpx.Response(
                    self.calendar_status,
                    json={"error": {"code": self.calendar_status, "message": "Invalid Credentials"}},
                )
            body: dict[str, Any] = {"items": self.events}
            if self.next_page_token:
                body["nextPageToken"] = self.next_page_token
            return httpx.Response(200, json=body)

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
def oauth(settings: Settings, fake_google: FakeGoogle) -> GoogleOAuth:
    return GoogleOAuth(settings=settings, transport=fake_google.transport)


@pytest.fixture
def provider(settings: Settings, oauth: GoogleOAuth) -> SessionProvider:
    return SessionProvider(settings, oauth=oauth)


@pytest.fixture
def calendar_client(settings: Settings, fake_google: FakeGoogle) -> GoogleCalendarClient:
    return GoogleCalendarClient(
        "test-access-token", settings=settings, transport=fake_google.transport
    )


@pytest.fixture
def session_token(settings: Settings) -> str:
    """A valid session cookie value for the fake Google account."""
    return create_session_token(
        user_id="google-user-1",
        provider_token="test-access-token",
        email="test@example.com",
        name="Test User",
        settings=settings,
    )


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(settings: Settings, provider: SessionProvider, fake_google: FakeGoogle):
    return create_app(
        settings=settings,
        session_provider=provider,
        calendar_client_factory=lambda token: GoogleCalendarClient(
            token, settings=settings, transport=fake_google.transport
        ),
    )


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signed_in_client(client: TestClient, settings: Settings, session_token: str) -> TestClient:
    client.cookies.set(settings.session_cookie_name, session_token)
    return client


# =============================================================================
# Sample Events
# =============================================================================


def api_event(event_id: str, start: dict[str, Any] | None, end: dict[str, Any] | None = None,
              summary: str | None = None, location: str | None = None) -> dict[str, Any]:
    """Build an event payload shaped like Google's events.list items."""
    data: dict[str, Any] = {"id": event_id}
    if summary is not None:
        data["summary"] = summary
    if location is not None:
        data["location"] = location
    if start is not None:
        data["start"] = start
    if end is not None:
        data["end"] = end
    return data


@pytest.fixture
def sample_api_events() -> list[dict[str, Any]]:
    """Events spread across January 2024, one all-day, one undated."""
    return [
        api_event(
            "evt-1",
            {"dateTime": "2024-01-05T10:00:00Z"},
            {"dateTime": "2024-01-05T11:00:00Z"},
            summary="Dentist",
            location="Main St 1",
        ),
        api_event(
            "evt-2",
            {"dateTime": "2024-01-10T10:00:00Z"},
            {"dateTime": "2024-01-10T12:00:00Z"},
            summary="Team offsite",
        ),
        api_event(
            "evt-3",
            {"date": "2024-01-12"},
            {"date": "2024-01-13"},
            summary="Conference",
        ),
        api_event(
            "evt-4",
            {"dateTime": "2024-01-20T23:30:00-05:00"},
            {"dateTime": "2024-01-21T00:30:00-05:00"},
            summary="Late call",
        ),
        api_event("evt-5", None, None),
    ]


@pytest.fixture
def sample_events(sample_api_events) -> list[CalendarEvent]:
    return [CalendarEvent.from_api(item) for item in sample_api_events]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
