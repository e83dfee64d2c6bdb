"""FastAPI application factory.

Creates and configures the FastAPI application with all routes.

## Usage

```python
from calendar_dashboard.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
```

## Configuration

The app is configured via environment variables. See `calendar_dashboard.config`
for available settings. The session provider and the calendar client factory
can be passed in explicitly, which is how tests swap out Google.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from calendar_dashboard.api.dependencies import CalendarClientFactory
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.calendar.cache import EventCache
from calendar_dashboard.calendar.client import GoogleCalendarClient
from calendar_dashboard.config import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    if not app.state.session_provider.is_configured:
        logger.warning("Sign-in is disabled until Google OAuth is configured")

    yield

    logger.info("Shutting down")


def create_app(
    settings: Settings | None = None,
    session_provider: SessionProvider | None = None,
    calendar_client_factory: CalendarClientFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings (default: cached settings from the environment)
        session_provider: Identity/session provider (default: Google-backed)
        calendar_client_factory: Builds a calendar client from a bearer token

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="View and filter your Google Calendar events",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_provider = session_provider or SessionProvider(settings)
    app.state.calendar_client_factory = calendar_client_factory or (
        lambda token: GoogleCalendarClient(token, settings=settings)
    )
    app.state.event_cache = EventCache()

    # Include routers
    from calendar_dashboard.api.routes import auth, events, pages

    app.include_router(pages.router, tags=["Pages"])
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(events.router, prefix="/api/events", tags=["Events"])

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app
