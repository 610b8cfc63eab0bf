# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from core.services.gallery_service import GalleryRefresher


def get_gallery_refresher(request: Request) -> GalleryRefresher:
    """
    Get the gallery refresher created in the app lifespan.

    Falls back to an idle refresher (no background loop) when the app runs
    without its lifespan, e.g. in a bare TestClient.
    """
    refresher = getattr(request.app.state, "gallery_refresher", None)
    if refresher is None:
        from app.config import settings

        refresher = GalleryRefresher(settings.GALLERY_REFRESH_SECONDS)
        request.app.state.gallery_refresher = refresher
    return refresher


# Type alias for dependency injection
GalleryRefresherDep = Annotated[GalleryRefresher, Depends(get_gallery_refresher)]
