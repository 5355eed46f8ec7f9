# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the domain logic behind the web routes:
# - models/: Pydantic schemas for form validation and stored records
# - services/: Campground, review, user, session and upload operations
# - validation.py: Schema checks that run before any store write
#
# Code in this package should NOT import from FastAPI routing.
# This keeps the logic testable without an HTTP client.
# =============================================================================
