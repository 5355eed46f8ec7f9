# =============================================================================
# app/auth/routes.py - Registration, Login and Logout
# =============================================================================
# Credential checks go through UserService; the session only ever stores
# the serialized user id. After login the user is sent back to the page
# remembered in the session's return_to slot.
# =============================================================================

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from app.dependencies import RequestContext, RequestContextDep
from app.exceptions import UsernameTakenError, ValidationFailedError
from app.middleware.session import USER_KEY, RETURN_TO_KEY
from app.rendering import render
from core.models.user import LoginForm, UserCreate, UserRecord
from core.services.user_service import UserService
from core.validation import validate_input
from lib.utils import sanitize_form_keys

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_REDIRECT = "/campground"


def _log_in(ctx: RequestContext, user: UserRecord) -> None:
    ctx.session.regenerate()
    ctx.session[USER_KEY] = UserService.serialize(user)
    ctx.current_user = user


def _safe_redirect_target(target: str | None) -> str:
    """Only same-site relative paths are honoured."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return DEFAULT_REDIRECT


# =============================================================================
# Register
# =============================================================================

@router.get("/register")
async def register_form(request: Request, ctx: RequestContextDep):
    return render(request, "users/register.html")


@router.post("/register")
async def register(request: Request, ctx: RequestContextDep):
    """
    Create an account and sign it in.

    Duplicate usernames and empty fields flash an error and return to the
    form instead of rendering the error page.
    """
    form = await request.form()
    data = dict(sanitize_form_keys(form.multi_items()))

    try:
        user_data = validate_input(UserCreate, {
            "username": data.get("username"),
            "email": data.get("email") or None,
            "password": data.get("password"),
        })
        user = await run_in_threadpool(UserService.register, user_data)
    except (UsernameTakenError, ValidationFailedError) as e:
        ctx.session.flash("error", e.message)
        return RedirectResponse("/register", status_code=303)

    _log_in(ctx, user)
    ctx.session.flash("success", "Welcome to Yelp Camp!")
    return RedirectResponse(DEFAULT_REDIRECT, status_code=303)


# =============================================================================
# Login / Logout
# =============================================================================

@router.get("/login")
async def login_form(request: Request, ctx: RequestContextDep):
    return render(request, "users/login.html")


@router.post("/login")
async def login(request: Request, ctx: RequestContextDep):
    """
    Authenticate and redirect to the remembered page.

    Bad credentials flash a generic message and go back to /login.
    """
    form = await request.form()
    data = dict(sanitize_form_keys(form.multi_items()))

    try:
        credentials = validate_input(LoginForm, {
            "username": data.get("username"),
            "password": data.get("password"),
        })
    except ValidationFailedError:
        credentials = None

    user = None
    if credentials is not None:
        user = await run_in_threadpool(
            UserService.authenticate, credentials.username, credentials.password
        )

    if user is None:
        ctx.session.flash("error", "Password or username is incorrect")
        return RedirectResponse("/login", status_code=303)

    _log_in(ctx, user)
    logger.info(f"User logged in: {user.username}")

    redirect_url = _safe_redirect_target(ctx.session.pop(RETURN_TO_KEY))
    ctx.session.flash("success", "Welcome back!")
    return RedirectResponse(redirect_url, status_code=303)


@router.get("/logout")
async def logout(ctx: RequestContextDep):
    """Forget the signed-in user and move what is left of the session to a new id."""
    if ctx.current_user:
        logger.info(f"User logged out: {ctx.current_user.username}")
    ctx.session.pop(USER_KEY)
    ctx.session.regenerate()
    ctx.current_user = None
    ctx.session.flash("success", "Goodbye!")
    return RedirectResponse(DEFAULT_REDIRECT, status_code=303)
