# =============================================================================
# app/rendering.py - Template Rendering
# =============================================================================
# Jinja2 templates live in app/templates. Every page gets the current
# user and flash messages from the RequestContext merged into its variables.
# =============================================================================

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.dependencies import build_request_context

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """
    Render a template with the request's context variables.

    Uses the RequestContext a handler already resolved; error pages raised
    before any handler ran get a fresh anonymous one.
    """
    ctx = getattr(request.state, "context", None) or build_request_context(request)
    variables = {**ctx.template_vars(), **(context or {})}
    return templates.TemplateResponse(request, name, variables, status_code=status_code)
