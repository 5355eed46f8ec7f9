# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - campground.py: Listing input and stored record
# - review.py: Review input and stored record
# - user.py: Registration and login forms
#
# These models define the "contract" between forms and the store.
# =============================================================================

from .campground import CampgroundInput, CampgroundRecord
from .review import ReviewInput, ReviewRecord
from .user import UserRecord, UserCreate, LoginForm

__all__ = [
    "CampgroundInput",
    "CampgroundRecord",
    "ReviewInput",
    "ReviewRecord",
    "UserRecord",
    "UserCreate",
    "LoginForm",
]
