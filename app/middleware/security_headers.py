# =============================================================================
# app/middleware/security_headers.py - Security Headers
# =============================================================================
# Adds a restrictive Content-Security-Policy built from the AppConfig
# allowlists, plus the usual hardening headers, to every response.
# =============================================================================

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.config import AppConfig


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set CSP and hardening headers; existing values on the response win."""

    def __init__(self, app: ASGIApp, config: AppConfig):
        super().__init__(app)
        self.headers = {
            "Content-Security-Policy": config.content_security_policy,
            "Cross-Origin-Opener-Policy": "same-origin",
            "Cross-Origin-Resource-Policy": "same-origin",
            "Origin-Agent-Cluster": "?1",
            "Referrer-Policy": "no-referrer",
            "Strict-Transport-Security": f"max-age={config.hsts_max_age}; includeSubDomains",
            "X-Content-Type-Options": "nosniff",
            "X-DNS-Prefetch-Control": "off",
            "X-Download-Options": "noopen",
            "X-Frame-Options": "SAMEORIGIN",
            "X-Permitted-Cross-Domain-Policies": "none",
            "X-XSS-Protection": "0",
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
