# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides:
# - Settings: raw environment values with development fallbacks
# - AppConfig: immutable middleware configuration (CSP allowlists, session
#   cookie parameters) assembled once at startup and passed explicitly
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a development fallback so the app boots locally
    without a .env file.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        default="http://localhost:54321",
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        default="dev-service-key",
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the web server to"
    )

    API_PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the web server"
    )

    # -------------------------------------------------------------------------
    # Security / Sessions
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret used to sign session cookies"
    )

    SESSION_COOKIE_NAME: str = Field(
        default="yelpcamp_session",
        description="Name of the cookie carrying the session id"
    )

    SESSION_MAX_AGE_DAYS: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Session lifetime, counted from creation"
    )

    # Paths that never overwrite the post-login redirect target
    RETURN_TO_EXCLUDED_PATHS: str = Field(
        default="/login,/,/logout,/register",
        description="Comma-separated paths excluded from return_to tracking"
    )

    CLOUDINARY_IMAGE_ORIGIN: str = Field(
        default="https://res.cloudinary.com/dcsoakvpl/",
        description="Image hosting origin allowed by the content security policy"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    UPLOAD_DIR: str = Field(
        default="uploads",
        description="Local staging directory for multipart image uploads"
    )

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.gif,.webp",
        description="Allowed image extensions (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def allowed_extensions_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_EXTENSIONS string into a list.

        Example: ".jpg, .PNG" -> [".jpg", ".png"]
        """
        return [ext.strip().lower() for ext in self.ALLOWED_IMAGE_EXTENSIONS.split(",")]

    @property
    def return_to_excluded_list(self) -> list[str]:
        return [p.strip() for p in self.RETURN_TO_EXCLUDED_PATHS.split(",") if p.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def session_max_age_seconds(self) -> int:
        return self.SESSION_MAX_AGE_DAYS * 24 * 60 * 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()


# =============================================================================
# Immutable App Config
# =============================================================================

SCRIPT_SRC_URLS = (
    "https://stackpath.bootstrapcdn.com/",
    "https://api.tiles.mapbox.com/",
    "https://api.mapbox.com/",
    "https://kit.fontawesome.com/",
    "https://cdnjs.cloudflare.com/",
    "https://cdn.jsdelivr.net",
)

STYLE_SRC_URLS = (
    "https://kit-free.fontawesome.com/",
    "https://api.mapbox.com/",
    "https://api.tiles.mapbox.com/",
    "https://fonts.googleapis.com/",
    "https://use.fontawesome.com/",
    "https://cdn.jsdelivr.net",
)

CONNECT_SRC_URLS = (
    "https://api.mapbox.com/",
    "https://a.tiles.mapbox.com/",
    "https://b.tiles.mapbox.com/",
    "https://events.mapbox.com/",
)

FONT_SRC_URLS: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionConfig:
    """Cookie and lifetime parameters for server-side sessions."""
    cookie_name: str
    secret: str
    max_age_seconds: int
    secure: bool
    excluded_return_paths: tuple[str, ...]


@dataclass(frozen=True)
class AppConfig:
    """
    Middleware configuration assembled once at process start.

    Frozen so the CSP allowlists and session parameters cannot be
    mutated after the app is built.
    """
    session: SessionConfig
    csp_directives: tuple[tuple[str, tuple[str, ...]], ...]
    upload_dir: str
    hsts_max_age: int = 15552000

    @classmethod
    def from_settings(cls, s: Settings) -> "AppConfig":
        directives = (
            ("default-src", ()),
            ("connect-src", ("'self'", *CONNECT_SRC_URLS)),
            ("script-src", ("'unsafe-inline'", "'self'", *SCRIPT_SRC_URLS)),
            ("style-src", ("'self'", "'unsafe-inline'", *STYLE_SRC_URLS)),
            ("worker-src", ("'self'", "blob:")),
            ("object-src", ()),
            ("img-src", (
                "'self'",
                "blob:",
                "data:",
                s.CLOUDINARY_IMAGE_ORIGIN,
                "https://images.unsplash.com/",
            )),
            ("font-src", ("'self'", *FONT_SRC_URLS)),
            ("base-uri", ("'self'",)),
            ("form-action", ("'self'",)),
            ("frame-ancestors", ("'self'",)),
            ("script-src-attr", ()),
        )
        return cls(
            session=SessionConfig(
                cookie_name=s.SESSION_COOKIE_NAME,
                secret=s.SECRET_KEY,
                max_age_seconds=s.session_max_age_seconds,
                secure=s.is_production,
                excluded_return_paths=tuple(s.return_to_excluded_list),
            ),
            csp_directives=directives,
            upload_dir=s.UPLOAD_DIR,
        )

    @property
    def content_security_policy(self) -> str:
        """
        Render the CSP header value.

        Empty source lists become 'none' so the browser rejects every
        origin for that category.
        """
        parts = []
        for name, sources in self.csp_directives:
            value = " ".join(sources) if sources else "'none'"
            parts.append(f"{name} {value}")
        return "; ".join(parts)
