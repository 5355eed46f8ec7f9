# =============================================================================
# app/middleware/session.py - Server-Side Session Middleware
# =============================================================================
# Loads the session named by the signed cookie, exposes it as
# request.state.session, remembers the pre-login target URL, and writes
# the session back to the store after the response is produced.
#
# Sessions that never receive data are never stored and get no cookie.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.config import SessionConfig
from core.services.session_service import SessionService

logger = logging.getLogger(__name__)

USER_KEY = "user_id"
RETURN_TO_KEY = "return_to"
FLASH_KEY = "_flash"

# Never tracked as a post-login target
UNTRACKED_PREFIXES = ("/static/", "/uploads/", "/health", "/favicon.ico")


class SessionData:
    """
    Mutable per-request view of one session record.

    Tracks whether anything changed so the middleware only writes when
    needed.
    """

    def __init__(
        self,
        session_id: str | None = None,
        data: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ):
        self.session_id = session_id
        self.data: dict[str, Any] = dict(data or {})
        self.expires_at = expires_at
        self.modified = False
        # Record to delete once the data has moved to a fresh id
        self.replaced_id: str | None = None

    @property
    def is_new(self) -> bool:
        return self.session_id is None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if self.data.get(key) != value or key not in self.data:
            self.data[key] = value
            self.modified = True

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def pop(self, key: str, default: Any = None) -> Any:
        if key in self.data:
            self.modified = True
        return self.data.pop(key, default)

    def regenerate(self) -> None:
        """
        Move the data to a new session id when the response is sent.

        The old record is destroyed and a new cookie is issued with a fresh
        expiry, so an id seen before login is useless afterwards.
        """
        if self.session_id is not None:
            self.replaced_id = self.session_id
            self.session_id = None
            self.expires_at = None
        self.modified = True

    # -------------------------------------------------------------------------
    # Flash messages
    # -------------------------------------------------------------------------

    def flash(self, category: str, message: str) -> None:
        """Queue a one-shot message for the next rendered page."""
        flashes = dict(self.data.get(FLASH_KEY) or {})
        flashes[category] = [*flashes.get(category, []), message]
        self[FLASH_KEY] = flashes

    def consume_flashes(self, category: str) -> list[str]:
        """Return and clear all queued messages of one category."""
        flashes = dict(self.data.get(FLASH_KEY) or {})
        messages = flashes.pop(category, [])
        if messages:
            if flashes:
                self[FLASH_KEY] = flashes
            else:
                self.pop(FLASH_KEY)
        return messages


class ServerSideSessionMiddleware(BaseHTTPMiddleware):
    """
    Cookie-keyed server-side sessions.

    The cookie carries only the signed session id. It is HTTP-only and
    expires at the session's fixed expires_at, set once at creation.
    """

    def __init__(self, app: ASGIApp, config: SessionConfig):
        super().__init__(app)
        self.config = config

    async def _load(self, request: Request) -> SessionData:
        cookie = request.cookies.get(self.config.cookie_name)
        session_id = SessionService.unsign(cookie, self.config.secret)
        if not session_id:
            return SessionData()

        record = await run_in_threadpool(SessionService.load, session_id)
        if not record:
            return SessionData()

        return SessionData(session_id, record["data"], record["expires_at"])

    def _track_return_to(self, request: Request, session: SessionData) -> None:
        path = request.url.path
        if path in self.config.excluded_return_paths or path.startswith(UNTRACKED_PREFIXES):
            return
        original_url = path + (f"?{request.url.query}" if request.url.query else "")
        session[RETURN_TO_KEY] = original_url

    async def _persist(self, session: SessionData) -> None:
        if session.is_new:
            if session.replaced_id:
                await run_in_threadpool(SessionService.destroy, session.replaced_id)
                session.replaced_id = None
            if not session.data:
                return
            session_id = SessionService.new_session_id()
            record = await run_in_threadpool(
                SessionService.create, session_id, session.data, self.config.max_age_seconds
            )
            session.session_id = session_id
            session.expires_at = record["expires_at"]
        else:
            await run_in_threadpool(SessionService.save, session.session_id, session.data)

    def _set_cookie(self, response: Response, session: SessionData) -> None:
        remaining = int((session.expires_at - datetime.now(timezone.utc)).total_seconds())
        response.set_cookie(
            key=self.config.cookie_name,
            value=SessionService.sign(session.session_id, self.config.secret),
            max_age=max(remaining, 0),
            expires=session.expires_at,
            path="/",
            httponly=True,
            secure=self.config.secure,
            samesite="lax",
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = await self._load(request)
        request.state.session = session
        self._track_return_to(request, session)

        response = await call_next(request)

        if session.modified:
            was_new = session.is_new
            await self._persist(session)
            if was_new and session.session_id:
                self._set_cookie(response, session)

        return response
