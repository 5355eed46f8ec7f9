# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Session-based authentication: register/login/logout routes plus the
# dependency that guards mutating routes.
#
# Usage:
#   from app.auth import AuthenticatedContextDep
#
#   @router.post("/protected")
#   async def protected(ctx: AuthenticatedContextDep):
#       return {"user_id": ctx.current_user.id}
# =============================================================================

from app.auth.dependencies import require_user, AuthenticatedContextDep

__all__ = [
    "require_user",
    "AuthenticatedContextDep",
]
