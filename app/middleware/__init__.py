# =============================================================================
# app/middleware/ - Request Middleware
# =============================================================================
# - method_override.py: _method parameter turns POST into PUT/PATCH/DELETE
# - session.py: Server-side sessions, flash messages, return_to tracking
# - security_headers.py: CSP allowlists and hardening headers
# =============================================================================

from .method_override import MethodOverrideMiddleware
from .session import ServerSideSessionMiddleware, SessionData
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "MethodOverrideMiddleware",
    "ServerSideSessionMiddleware",
    "SessionData",
    "SecurityHeadersMiddleware",
]
