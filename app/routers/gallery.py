# =============================================================================
# app/routers/gallery.py - Gallery Listing Endpoint
# =============================================================================
# Serves the storage-backed gallery snapshot kept fresh by GalleryRefresher.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import GalleryRefresherDep
from core.models.gallery import GallerySnapshot

router = APIRouter()


@router.get("/gallery", response_model=GallerySnapshot)
async def get_gallery(refresher: GalleryRefresherDep):
    """
    Get the gallery listing.

    Returns the latest background snapshot; the first request before any
    refresh has completed lists the bucket directly.
    """
    if refresher.snapshot.refreshed_at is None:
        return await refresher.refresh()
    return refresher.snapshot
