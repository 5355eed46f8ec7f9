# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for per-request state.
#
# RequestContext bundles the session, the signed-in user and this render's
# flash messages. Handlers receive it explicitly via Depends() and pass it
# on to the renderer.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool

from app.middleware.session import SessionData, USER_KEY
from core.models.user import UserRecord
from core.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """Per-request values every handler and template may need."""
    session: SessionData
    current_user: UserRecord | None = None
    success: list[str] = field(default_factory=list)
    error: list[str] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def template_vars(self) -> dict:
        """Variables every template sees. Pending flashes are consumed here."""
        self.success.extend(self.session.consume_flashes("success"))
        self.error.extend(self.session.consume_flashes("error"))
        return {
            "current_user": self.current_user,
            "success": self.success,
            "error": self.error,
        }


def build_request_context(request: Request, current_user: UserRecord | None = None) -> RequestContext:
    """
    Build a context from the request's session.

    Falls back to an empty session when the session middleware did not run.
    Flashes stay queued until a page is rendered, so redirect-only handlers
    pass them through.
    """
    session = getattr(request.state, "session", None) or SessionData()
    ctx = RequestContext(session=session, current_user=current_user)
    request.state.context = ctx
    return ctx


async def get_request_context(request: Request) -> RequestContext:
    """
    Resolve the signed-in user from the session and build the context.

    A session pointing at a deleted user is treated as signed out.
    """
    existing = getattr(request.state, "context", None)
    if existing is not None:
        return existing

    session = getattr(request.state, "session", None) or SessionData()
    current_user = None
    user_id = session.get(USER_KEY)
    if user_id:
        current_user = await run_in_threadpool(UserService.deserialize, user_id)
        if current_user is None:
            logger.info(f"Session user {user_id} no longer exists; signing out")
            session.pop(USER_KEY)

    return build_request_context(request, current_user)


# Type alias for dependency injection
RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]

