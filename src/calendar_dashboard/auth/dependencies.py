"""FastAPI dependencies for authentication.

These dependencies give route handlers the session provider and the current
session state.

## Usage

```python
from fastapi import Depends
from calendar_dashboard.auth import SessionData, require_session

@app.get("/api/whoami")
async def whoami(session: SessionData = Depends(require_session)):
    return {"email": session.email}
```
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from calendar_dashboard.auth.gate import SessionGateResult, check_session
from calendar_dashboard.auth.provider import SessionProvider
from calendar_dashboard.auth.session import SessionData


def get_session_provider(request: Request) -> SessionProvider:
    """Return the provider the app factory attached to ``app.state``."""
    return request.app.state.session_provider


def get_session_cookie(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
) -> str | None:
    """Raw session cookie value, if any."""
    return request.cookies.get(provider.settings.session_cookie_name)


def get_gate_result(
    provider: SessionProvider = Depends(get_session_provider),
    session_cookie: str | None = Depends(get_session_cookie),
) -> SessionGateResult:
    """Run the session gate for the current request."""
    return check_session(provider, session_cookie)


def get_session_optional(
    gate: SessionGateResult = Depends(get_gate_result),
) -> SessionData | None:
    """Get the current session if signed in, or None."""
    return gate.session


def require_session(
    session: SessionData | None = Depends(get_session_optional),
) -> SessionData:
    """Get the current session.

    Raises 401 if not authenticated.
    """
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return session
