# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .campground_service import CampgroundService
from .review_service import ReviewService
from .user_service import UserService
from .session_service import SessionService
from .storage_service import StorageService

__all__ = [
    "CampgroundService",
    "ReviewService",
    "UserService",
    "SessionService",
    "StorageService",
]
