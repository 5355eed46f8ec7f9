# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the YelpCamp app:
# - test_models.py: Schema and form validation
# - test_campgrounds.py / test_reviews.py: Services and page routes
# - test_auth.py / test_sessions.py: Accounts, login and session cookies
# - test_middleware.py / test_errors.py: _method, headers, error pages
#
# conftest.py swaps the Supabase tables for an in-memory store.
# Run tests with: pytest
# =============================================================================
