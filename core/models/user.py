# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """
    A stored user without credentials.

    This is what the session deserializes to and what templates see as
    the current user.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str | None = None


class UserCreate(BaseModel):
    """Registration form body. The password is hashed before storage."""

    username: str = Field(..., min_length=1, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    password: str = Field(..., min_length=1)


class LoginForm(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
