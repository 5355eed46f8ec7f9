# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the YelpCamp web app.
# It assembles the immutable AppConfig once, then wires middleware,
# routers, static mounts and the terminal error handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import AppConfig, settings
from app.dependencies import RequestContextDep
from app.exceptions import (
    YelpCampException,
    http_exception_handler,
    request_validation_exception_handler,
    store_exception_handler,
    unhandled_exception_handler,
    yelpcamp_exception_handler,
)
from app.middleware import (
    MethodOverrideMiddleware,
    SecurityHeadersMiddleware,
    ServerSideSessionMiddleware,
)
from app.rendering import render
from app.routers import campgrounds, health, reviews
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Middleware configuration; derived from settings when omitted

    Returns:
        The configured FastAPI app
    """
    config = config or AppConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting YelpCamp in {settings.ENVIRONMENT} mode")
        Path(config.upload_dir).mkdir(parents=True, exist_ok=True)
        yield
        logger.info("Shutting down YelpCamp")

    app = FastAPI(
        title="YelpCamp",
        description="Campground listings and reviews",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # =========================================================================
    # Middleware
    # =========================================================================
    # Starlette runs the last-added middleware first, so requests pass
    # through: security headers -> method override -> sessions -> routes

    app.add_middleware(ServerSideSessionMiddleware, config=config.session)
    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, config=config)

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(YelpCampException, yelpcamp_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(SupabaseClientError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(auth_routes.router, tags=["Users"])

    app.include_router(
        campgrounds.router,
        prefix="/campground",
        tags=["Campgrounds"]
    )

    app.include_router(
        reviews.router,
        prefix="/campground/{campground_id}/review",
        tags=["Reviews"]
    )

    app.include_router(health.router, tags=["Health"])

    # =========================================================================
    # Static files
    # =========================================================================

    app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")
    app.mount("/uploads", StaticFiles(directory=config.upload_dir, check_dir=False), name="uploads")

    @app.get("/", tags=["Home"])
    async def home(request: Request, ctx: RequestContextDep):
        """Landing page."""
        return render(request, "home.html")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
