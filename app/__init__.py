# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the YelpCamp web application:
# - main.py: App factory, middleware setup, error handlers
# - config.py: Environment variable loading and the frozen AppConfig
# - middleware/: Sessions, _method override, security headers
# - auth/: Register/login/logout and the signed-in guard
# - routers/: Page routes organized by feature
# - templates/: Jinja2 views
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
