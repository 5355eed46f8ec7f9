# =============================================================================
# app/middleware/method_override.py - _method Override
# =============================================================================
# HTML forms can only send GET and POST. A POST carrying _method=PUT,
# PATCH or DELETE (in the query string or an urlencoded body) is routed
# as that verb instead.
#
# Written as plain ASGI so the consumed body can be replayed downstream.
# =============================================================================

import logging
from urllib.parse import parse_qs

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

OVERRIDE_PARAM = "_method"
ALLOWED_OVERRIDES = frozenset({"PUT", "PATCH", "DELETE"})
FORM_CONTENT_TYPE = b"application/x-www-form-urlencoded"


class MethodOverrideMiddleware:
    """Rewrite POST requests to the verb named by the _method parameter."""

    def __init__(self, app: ASGIApp, param: str = OVERRIDE_PARAM):
        self.app = app
        self.param = param

    def _from_query(self, scope: Scope) -> str | None:
        query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
        values = query.get(self.param)
        return values[0] if values else None

    def _from_body(self, body: bytes) -> str | None:
        form = parse_qs(body.decode("utf-8", "replace"))
        values = form.get(self.param)
        return values[0] if values else None

    @staticmethod
    def _is_form(scope: Scope) -> bool:
        for name, value in scope.get("headers", []):
            if name == b"content-type":
                return value.split(b";")[0].strip().lower() == FORM_CONTENT_TYPE
        return False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST":
            await self.app(scope, receive, send)
            return

        override = self._from_query(scope)

        if override is None and self._is_form(scope):
            chunks = []
            more_body = True
            while more_body:
                message = await receive()
                if message["type"] != "http.request":
                    break
                chunks.append(message.get("body", b""))
                more_body = message.get("more_body", False)
            body = b"".join(chunks)
            override = self._from_body(body)
            receive = _replay(body, receive)

        if override and override.upper() in ALLOWED_OVERRIDES:
            logger.debug(f"Method override POST -> {override.upper()} for {scope['path']}")
            scope = dict(scope, method=override.upper())

        await self.app(scope, receive, send)


def _replay(body: bytes, receive: Receive) -> Receive:
    """Serve an already-read body once, then fall through to the real channel."""
    sent = False

    async def wrapped() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return wrapped
