"""HTML pages.

Pages are plain server-rendered HTML built from f-strings. Every value that
comes from Google or the query string goes through ``html.escape``.
"""

from __future__ import annotations

from datetime import tzinfo
from html import escape

from calendar_dashboard.auth.session import SessionData
from calendar_dashboard.calendar.events import EventTime
from calendar_dashboard.calendar.filters import FilterMode
from calendar_dashboard.calendar.view import DashboardView, Notice

_STYLE = """
    body {
        font-family: -apple-system, BlinkMacSystemFont, sans-serif;
        margin: 0;
        padding: 48px 24px;
        display: flex;
        flex-direction: column;
        align-items: center;
        color: #111827;
    }
    h1 { font-size: 2rem; margin-bottom: 32px; }
    .container { width: 100%; max-width: 960px; }
    .button {
        display: inline-block;
        border: none;
        border-radius: 4px;
        padding: 8px 16px;
        font-weight: bold;
        color: #fff;
        background: #3b82f6;
        text-decoration: none;
        cursor: pointer;
    }
    .button.danger { background: #ef4444; }
    .toasts { position: fixed; top: 16px; right: 16px; }
    .toast { padding: 10px 14px; margin-bottom: 8px; border-radius: 4px; background: #e0f2fe; }
    .toast.error { background: #fee2e2; color: #991b1b; }
    form.filters { display: flex; gap: 12px; margin-bottom: 16px; align-items: center; }
    form.filters input, form.filters select { padding: 8px; border: 1px solid #d1d5db; border-radius: 4px; }
    table { width: 100%; border-collapse: collapse; }
    th {
        padding: 12px 24px;
        border-bottom: 2px solid #d1d5db;
        text-align: left;
        font-size: 0.75rem;
        color: #6b7280;
        text-transform: uppercase;
        letter-spacing: 0.05em;
    }
    td { padding: 16px 24px; border-bottom: 1px solid #6b7280; white-space: nowrap; }
"""

_MODE_LABELS = {
    FilterMode.ALL: "All upcoming",
    FilterMode.SINGLE: "Single date",
    FilterMode.RANGE: "Date range",
}


def _page(title: str, body: str, notices: list[Notice] | None = None) -> str:
    toasts = "".join(
        f'<div class="toast {escape(n.level.value)}" role="status">{escape(n.message)}</div>'
        for n in notices or []
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="toasts">{toasts}</div>
    {body}
</body>
</html>"""


def format_event_time(value: EventTime, tz: tzinfo) -> str:
    """Table cell text for an event start or end."""
    if value.date_time is not None:
        return value.date_time.astimezone(tz).strftime("%Y-%m-%d %H:%M")
    if value.date is not None:
        return f"{value.date.isoformat()} (all day)"
    return "Unknown"


def render_login_page(app_name: str, notices: list[Notice] | None = None) -> str:
    """Entry view with the sign-in button."""
    body = f"""
    <h1>Welcome to {escape(app_name)}</h1>
    <a class="button" href="/auth/login">Sign in with Google</a>"""
    return _page(app_name, body, notices)


def _filter_form(view: DashboardView) -> str:
    event_filter = view.event_filter
    options = "".join(
        f'<option value="{mode.value}"{" selected" if mode == event_filter.mode else ""}>'
        f"{escape(label)}</option>"
        for mode, label in _MODE_LABELS.items()
    )
    anchor = event_filter.anchor_date.isoformat() if event_filter.anchor_date else ""
    end = event_filter.end_date.isoformat() if event_filter.end_date else ""
    return f"""
    <form class="filters" method="get" action="/dashboard">
        <select name="mode" aria-label="Filter mode">{options}</select>
        <input type="date" name="date" value="{anchor}" aria-label="Start Date">
        <input type="date" name="end" value="{end}" min="{anchor}" aria-label="End Date">
        <button class="button" type="submit">Filter</button>
    </form>"""


def _events_table(view: DashboardView) -> str:
    events = view.visible_events
    if not events:
        return "<div>No events found</div>"

    rows = "".join(
        f"""
            <tr data-event-id="{escape(event.id)}">
                <td>{escape(event.title)}</td>
                <td>{escape(event.location or "")}</td>
                <td>{escape(format_event_time(event.start, view.tz))}</td>
                <td>{escape(format_event_time(event.end, view.tz))}</td>
            </tr>"""
        for event in events
    )
    return f"""
    <table>
        <thead>
            <tr><th>Event</th><th>Location</th><th>Start</th><th>End</th></tr>
        </thead>
        <tbody>{rows}
        </tbody>
    </table>"""


def render_dashboard_page(
    app_name: str,
    view: DashboardView,
    session: SessionData,
) -> str:
    """Dashboard with the filter form and the events table."""
    who = session.name or session.email or "you"
    body = f"""
    <h1>Your Calendar Events</h1>
    <div class="container">
        <p>Signed in as {escape(who)}.</p>
        <form method="post" action="/auth/logout">
            <button class="button danger" type="submit">Sign out</button>
        </form>
        {_filter_form(view)}
        {_events_table(view)}
    </div>"""
    return _page(app_name, body, view.notices)
