"""FastAPI application and routes.

## Structure

- / - Entry view (sign-in)
- /dashboard - Events table with date filters
- /auth - Authentication endpoints (Google OAuth)
- /api/events - Filtered events as JSON
- /health - Health check

## Authentication

The dashboard and the events API require a session cookie, created at the
end of the OAuth callback.
"""

from calendar_dashboard.api.app import create_app

__all__ = ["create_app"]
