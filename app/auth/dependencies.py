# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for routes that need a signed-in user.
#
# Usage:
#   from app.auth import AuthenticatedContextDep
#
#   @router.post("/protected")
#   async def protected(ctx: AuthenticatedContextDep):
#       return {"user_id": ctx.current_user.id}
# =============================================================================

import logging
from typing import Annotated

from fastapi import Depends

from app.dependencies import RequestContext, RequestContextDep
from app.exceptions import AuthenticationRequiredError

logger = logging.getLogger(__name__)


async def require_user(ctx: RequestContextDep) -> RequestContext:
    """
    Context for routes that need a signed-in user.

    The terminal error handler turns the raised error into a redirect to
    /login; the page being requested is already remembered in return_to.

    Raises:
        AuthenticationRequiredError: If nobody is signed in
    """
    if not ctx.is_authenticated:
        logger.debug("Anonymous request to a protected route")
        raise AuthenticationRequiredError()
    return ctx


AuthenticatedContextDep = Annotated[RequestContext, Depends(require_user)]
