"""Browser pages.

- GET / - Entry view with the sign-in button
- GET /dashboard - Filterable table of the user's calendar events

Both pages run the session gate first: signed-out visitors on the dashboard
are sent to the entry view, signed-in visitors on the entry view are sent to
the dashboard.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from calendar_dashboard.api.dependencies import (
    CalendarClientFactory,
    build_event_filter,
    get_calendar_client_factory,
    get_event_cache,
)
from calendar_dashboard.api.rendering import render_dashboard_page, render_login_page
from calendar_dashboard.auth.dependencies import get_gate_result, get_session_provider
from calendar_dashboard.auth.gate import (
    DASHBOARD_PATH,
    ENTRY_PATH,
    SessionGateResult,
    redirect_target,
)
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.calendar.cache import EventCache
from calendar_dashboard.calendar.view import DashboardView, Notice, NoticeLevel

logger = logging.getLogger(__name__)

router = APIRouter()

ENTRY_NOTICES = {
    "signed_out": Notice("You have been signed out."),
    "signout_failed": Notice(
        "Sign-out could not be confirmed with Google. Your session here has ended.",
        NoticeLevel.ERROR,
    ),
}


@router.get(ENTRY_PATH, response_class=HTMLResponse, response_model=None)
async def entry_page(
    notice: str | None = None,
    gate: SessionGateResult = Depends(get_gate_result),
    provider: SessionProvider = Depends(get_session_provider),
) -> HTMLResponse | RedirectResponse:
    """Entry view."""
    target = redirect_target(gate, ENTRY_PATH)
    if target is not None:
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    notices = [ENTRY_NOTICES[notice]] if notice in ENTRY_NOTICES else []
    return HTMLResponse(render_login_page(provider.settings.app_name, notices))


@router.get(DASHBOARD_PATH, response_class=HTMLResponse, response_model=None)
async def dashboard_page(
    request: Request,
    mode: str | None = None,
    date: str | None = None,
    end: str | None = None,
    gate: SessionGateResult = Depends(get_gate_result),
    provider: SessionProvider = Depends(get_session_provider),
    client_factory: CalendarClientFactory = Depends(get_calendar_client_factory),
    event_cache: EventCache = Depends(get_event_cache),
) -> HTMLResponse | RedirectResponse:
    """Dashboard view.

    Fetches once for the requested filter. A failed fetch still renders the
    page with an error notification, over the list from the session's last
    successful fetch.
    """
    target = redirect_target(gate, DASHBOARD_PATH)
    if target is not None:
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    settings = provider.settings
    session = gate.session
    view = DashboardView(tz=settings.tz, events=event_cache.get(session.session_id))

    try:
        view.set_filter(build_event_filter(mode, date, end))
    except ValueError as e:
        logger.info(f"Ignoring invalid filter from {request.client}: {e}")
        view.notify(f"Invalid filter: {e}", NoticeLevel.ERROR)

    if await view.refresh(client_factory(gate.provider_token)):
        event_cache.put(session.session_id, view.events, session.expires_at)

    return HTMLResponse(render_dashboard_page(settings.app_name, view, session))
