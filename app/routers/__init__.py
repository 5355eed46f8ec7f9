# =============================================================================
# app/routers/ - Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - campgrounds.py: Campground listing, detail, create/edit/delete pages
# - reviews.py: Review creation and deletion under a campground
# - health.py: Health check endpoints
#
# User registration and login live in app/auth/routes.py.
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import campgrounds
from . import reviews
from . import health

__all__ = [
    "campgrounds",
    "reviews",
    "health",
]
