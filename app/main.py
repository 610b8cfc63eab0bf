# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Artfolio API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import PortfolioException, portfolio_exception_handler
from app.routers import health, artworks, tags, gallery, contact
from app.auth import routes as auth_routes
from core.services.gallery_service import GalleryRefresher

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration problems, start the gallery refresher
    - Shutdown: stop the gallery refresher
    """
    logger.info(f"Starting Artfolio API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if not settings.supabase_configured:
        logger.error(
            "Supabase URL and/or anonymous key are missing. "
            "Artwork, gallery and auth endpoints will fail until SUPABASE_URL "
            "and SUPABASE_ANON_KEY are set."
        )

    refresher = GalleryRefresher(settings.GALLERY_REFRESH_SECONDS)
    app.state.gallery_refresher = refresher
    refresher.start()

    yield

    logger.info("Shutting down Artfolio API")
    await refresher.stop()


# Create FastAPI application
app = FastAPI(
    title="Artfolio API",
    description="""
## Artist Portfolio API

Backend for a single-page artist portfolio: gallery, about and contact
sections for visitors, plus an admin area to manage artworks and tags.

### Public

- **Artworks** - browse artworks with their tags, newest first
- **Gallery** - images currently in the storage bucket
- **Contact** - send a message to the artist

### Admin (Bearer token)

- **Artworks** - upload, edit and delete artworks
- **Tags** - create tags; artwork uploads create missing tags automatically
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign in, sign up, sign out and token checks",
        },
        {
            "name": "Artworks",
            "description": "Artwork listing and management",
        },
        {
            "name": "Tags",
            "description": "Tag listing and creation",
        },
        {
            "name": "Gallery",
            "description": "Images listed from storage",
        },
        {
            "name": "Contact",
            "description": "Contact form delivery",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(PortfolioException)
async def handle_portfolio_exception(request: Request, exc: PortfolioException):
    """Handle custom portfolio exceptions."""
    return await portfolio_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    auth_routes.router,
    prefix="/api/v1",
    tags=["Auth"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    artworks.router,
    prefix="/api/v1/artworks",
    tags=["Artworks"]
)

app.include_router(
    tags.router,
    prefix="/api/v1/tags",
    tags=["Tags"]
)

app.include_router(
    gallery.router,
    prefix="/api/v1",
    tags=["Gallery"]
)

app.include_router(
    contact.router,
    prefix="/api/v1",
    tags=["Contact"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Artfolio API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
