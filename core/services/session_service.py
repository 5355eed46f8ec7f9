# =============================================================================
# core/services/session_service.py - Server-Side Session Store
# =============================================================================
# Session state lives in the web_sessions table, keyed by an opaque id.
# The browser only ever holds that id, HMAC-signed, in an HTTP-only cookie.
#
# Lifetime is fixed at creation: expires_at = created_at + max_age, and
# saving a session never extends it.
# =============================================================================

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import TypeAdapter

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "web_sessions"


# Postgres trims trailing zeros from fractional seconds ("10:30:00.12345+00:00")
_TIMESTAMP = TypeAdapter(datetime)


def _parse_timestamp(value: str | datetime) -> datetime:
    parsed = _TIMESTAMP.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SessionService:
    """
    Service for server-side session records.

    A record looks like:
        {
            "id": "kq3...",
            "data": {"user_id": "...", "return_to": "/campground/new"},
            "expires_at": "2024-01-22T10:30:00+00:00",
            "created_at": "2024-01-15T10:30:00+00:00"
        }
    """

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(32)

    # -------------------------------------------------------------------------
    # Cookie signing
    # -------------------------------------------------------------------------

    @staticmethod
    def sign(session_id: str, secret: str) -> str:
        digest = hmac.new(secret.encode(), session_id.encode(), hashlib.sha256).hexdigest()
        return f"{session_id}.{digest}"

    @staticmethod
    def unsign(cookie_value: str | None, secret: str) -> str | None:
        """Return the session id if the signature matches, else None."""
        if not cookie_value or "." not in cookie_value:
            return None
        session_id, _, digest = cookie_value.rpartition(".")
        expected = hmac.new(secret.encode(), session_id.encode(), hashlib.sha256).hexdigest()
        if not hmac.compare_digest(digest, expected):
            logger.warning("Rejected session cookie with bad signature")
            return None
        return session_id

    # -------------------------------------------------------------------------
    # Store operations
    # -------------------------------------------------------------------------

    @staticmethod
    def load(session_id: str) -> dict[str, Any] | None:
        """
        Load a live session.

        Expired records are deleted on sight and reported as missing.
        """
        record = SupabaseClient.fetch_by_id(SESSIONS_TABLE, session_id)
        if not record:
            return None

        expires_at = _parse_timestamp(record["expires_at"])
        if expires_at <= datetime.now(timezone.utc):
            logger.debug(f"Session expired: {session_id[:8]}...")
            SupabaseClient.delete_by_id(SESSIONS_TABLE, session_id)
            return None

        record["expires_at"] = expires_at
        record["data"] = record.get("data") or {}
        return record

    @staticmethod
    def create(session_id: str, data: dict[str, Any], max_age_seconds: int) -> dict[str, Any]:
        """Insert a new session whose expiry is fixed from now."""
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=max_age_seconds)

        record = SupabaseClient.insert(SESSIONS_TABLE, {
            "id": session_id,
            "data": data,
            "expires_at": expires_at.isoformat(),
            "created_at": now.isoformat(),
        })
        logger.debug(f"Created session: {session_id[:8]}... expires {expires_at.isoformat()}")

        record["expires_at"] = _parse_timestamp(record["expires_at"])
        return record

    @staticmethod
    def save(session_id: str, data: dict[str, Any]) -> None:
        """Overwrite session data. The expiry is left untouched."""
        SupabaseClient.update_by_id(SESSIONS_TABLE, session_id, {"data": data})

    @staticmethod
    def destroy(session_id: str) -> None:
        SupabaseClient.delete_by_id(SESSIONS_TABLE, session_id)
        logger.debug(f"Destroyed session: {session_id[:8]}...")
