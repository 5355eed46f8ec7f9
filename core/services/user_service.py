# =============================================================================
# core/services/user_service.py - Users and Credentials
# =============================================================================
# Registration, password checking, and the serialize/deserialize pair the
# session layer uses to remember who is signed in.
#
# Passwords are hashed and salted by passlib's bcrypt scheme; this module
# never stores or compares plaintext.
# =============================================================================

import logging
from uuid import UUID

from passlib.context import CryptContext

from lib.supabase_client import SupabaseClient, DuplicateRecordError
from core.models.user import UserCreate, UserRecord
from app.exceptions import UsernameTakenError

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

# -----------------------------------------------------------------------------
# Password Hashing (bcrypt 72-byte safe)
# -----------------------------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
BCRYPT_BYTE_LIMIT = 72


def _truncate_password(password: str) -> str:
    """Truncate to the bcrypt byte limit without splitting a UTF-8 sequence."""
    b = password.encode("utf-8")
    if len(b) > BCRYPT_BYTE_LIMIT:
        logger.debug(f"Password bytes exceeded bcrypt limit; truncating from {len(b)}")
        b = b[:BCRYPT_BYTE_LIMIT]
    return b.decode("utf-8", "ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(_truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate_password(plain_password), hashed_password)


def _to_record(row: dict) -> UserRecord:
    return UserRecord(id=str(row["id"]), username=row["username"], email=row.get("email"))


class UserService:
    """
    Service for user accounts.

    authenticate/serialize/deserialize are the three hooks the session
    middleware needs; everything else about sessions lives in
    SessionService.
    """

    @staticmethod
    def register(data: UserCreate) -> UserRecord:
        """
        Create a user with a hashed password.

        Raises:
            UsernameTakenError: If the username already exists
        """
        if SupabaseClient.fetch_one_where(USERS_TABLE, "username", data.username):
            raise UsernameTakenError(data.username)

        payload = {
            "username": data.username,
            "email": data.email,
            "password_hash": hash_password(data.password),
        }

        try:
            row = SupabaseClient.insert(USERS_TABLE, payload)
        except DuplicateRecordError:
            # Lost a race with a concurrent registration
            raise UsernameTakenError(data.username)

        logger.info(f"Registered user: {row['id']} ({data.username})")
        return _to_record(row)

    @staticmethod
    def authenticate(username: str, password: str) -> UserRecord | None:
        """
        Check a username/password pair.

        Returns:
            The user on success, None for an unknown user or wrong password
        """
        row = SupabaseClient.fetch_one_where(USERS_TABLE, "username", username)
        if not row or not row.get("password_hash"):
            logger.info(f"Login failed: unknown user {username}")
            return None

        if not verify_password(password, row["password_hash"]):
            logger.info(f"Login failed: bad password for {username}")
            return None

        return _to_record(row)

    @staticmethod
    def serialize(user: UserRecord) -> str:
        """The session stores only the user id."""
        return user.id

    @staticmethod
    def deserialize(token: str | UUID | None) -> UserRecord | None:
        """Resolve a stored user id back to a user, None if it no longer exists."""
        if not token:
            return None
        row = SupabaseClient.fetch_by_id(USERS_TABLE, token)
        return _to_record(row) if row else None
