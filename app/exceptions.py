# =============================================================================
# app/exceptions.py - Custom Exceptions and Terminal Error Handlers
# =============================================================================
# Centralized exception handling for the web app.
#
# Every failure site raises a YelpCampException carrying a fixed set of
# fields (kind, status_code, message). The handlers at the bottom of this
# module are the single terminal stage: they log the error, then either
# redirect to the login page (authentication) or render error.html.
# =============================================================================

import logging
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 500
DEFAULT_MESSAGE = "Something went wrong"


class ErrorKind(str, Enum):
    """Failure categories. The terminal handler only branches on AUTHENTICATION."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class YelpCampException(Exception):
    """
    Base exception for the YelpCamp app.

    All custom exceptions inherit from this class and are constructed
    explicitly at the failure site with a kind, an HTTP status and a
    human-readable message.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.INTERNAL,
        status_code: int = DEFAULT_STATUS,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a template/JSON friendly dict."""
        result = {
            "kind": self.kind.value,
            "status_code": self.status_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationFailedError(YelpCampException):
    """Raised when a submitted form does not satisfy its schema."""

    def __init__(self, fields: list[str], message: str):
        super().__init__(
            message=message,
            kind=ErrorKind.VALIDATION,
            status_code=400,
            details={"fields": fields},
        )
        self.fields = fields


class UsernameTakenError(YelpCampException):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str):
        super().__init__(
            message="A user with the given username is already registered",
            kind=ErrorKind.VALIDATION,
            status_code=400,
            details={"username": username},
        )


class InvalidFileTypeError(YelpCampException):
    """Raised when an uploaded image has a disallowed extension."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}. Allowed: {', '.join(allowed)}",
            kind=ErrorKind.VALIDATION,
            status_code=400,
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(YelpCampException):
    """Raised when an uploaded image exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            kind=ErrorKind.VALIDATION,
            status_code=413,
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationRequiredError(YelpCampException):
    """Raised when a route needs a signed-in user and there is none."""

    def __init__(self, message: str = "You must be signed in first!"):
        super().__init__(
            message=message,
            kind=ErrorKind.AUTHENTICATION,
            status_code=401,
        )


# =============================================================================
# Not Found Exceptions
# =============================================================================

class CampgroundNotFoundError(YelpCampException):
    """Raised when a campground ID doesn't exist."""

    def __init__(self, campground_id: str):
        super().__init__(
            message="Cannot find that campground!",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"campground_id": campground_id},
        )


class ReviewNotFoundError(YelpCampException):
    """Raised when a review ID doesn't exist under the given campground."""

    def __init__(self, review_id: str):
        super().__init__(
            message="Cannot find that review!",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"review_id": review_id},
        )


class PageNotFoundError(YelpCampException):
    """Raised for routes that match nothing."""

    def __init__(self, path: str):
        super().__init__(
            message="Page Not Found",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"path": path},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def normalize_error(exc: Exception) -> tuple[int, str]:
    """
    Pull a status and message off any exception.

    Missing status becomes 500 and a missing message becomes
    "Something went wrong".
    """
    status_code = getattr(exc, "status_code", None)
    if not isinstance(status_code, int):
        status_code = DEFAULT_STATUS
    message = getattr(exc, "message", None) or getattr(exc, "detail", None) or str(exc)
    if not isinstance(message, str) or not message:
        message = DEFAULT_MESSAGE
    return status_code, message


async def _render_error(request: Request, status_code: int, message: str) -> Response:
    # Imported lazily: both modules depend on the services, which raise
    # the exceptions defined above
    from app.dependencies import get_request_context
    from app.rendering import render

    if getattr(request.state, "context", None) is None:
        try:
            await get_request_context(request)
        except SupabaseClientError as e:
            logger.warning(f"Rendering error page without a user: {e}")

    return render(
        request,
        "error.html",
        {"status_code": status_code, "message": message},
        status_code=status_code,
    )


async def yelpcamp_exception_handler(request: Request, exc: YelpCampException) -> Response:
    """
    Terminal handler for YelpCampException.

    Authentication failures redirect to /login with a flash message;
    everything else renders the error page with the attached status.
    """
    status_code, message = normalize_error(exc)

    if exc.kind is ErrorKind.AUTHENTICATION:
        logger.info(f"Redirecting to login from {request.url.path}: {message}")
        session = getattr(request.state, "session", None)
        if session is not None:
            session.flash("error", message)
        return RedirectResponse("/login", status_code=303)

    logger.warning(f"{exc.kind.value} error on {request.method} {request.url.path}: {message}")
    return await _render_error(request, status_code, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render framework HTTP errors (unmatched routes, bad methods) as pages."""
    if exc.status_code == 404:
        not_found = PageNotFoundError(request.url.path)
        logger.warning(f"Page not found: {request.method} {request.url.path}")
        return await _render_error(request, not_found.status_code, not_found.message)

    status_code, message = normalize_error(exc)
    logger.warning(f"HTTP {status_code} on {request.method} {request.url.path}: {message}")
    return await _render_error(request, status_code, message)


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> Response:
    """
    Malformed parameters are client errors.

    A path id that is not a UUID can never name a record, so it gets the
    same 404 page as an unmatched route.
    """
    errors = exc.errors()
    if any(tuple(err.get("loc", ()))[:1] == ("path",) for err in errors):
        not_found = PageNotFoundError(request.url.path)
        logger.warning(f"Malformed path parameter on {request.url.path}: {errors}")
        return await _render_error(request, not_found.status_code, not_found.message)

    logger.warning(f"Request validation failed on {request.url.path}: {errors}")
    return await _render_error(request, 400, "Invalid request")


async def store_exception_handler(request: Request, exc: SupabaseClientError) -> Response:
    """Store failures are internal errors; the detail goes to the log only."""
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return await _render_error(request, DEFAULT_STATUS, DEFAULT_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return await _render_error(request, DEFAULT_STATUS, DEFAULT_MESSAGE)
