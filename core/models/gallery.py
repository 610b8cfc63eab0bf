# =============================================================================
# core/models/gallery.py - Gallery Listing Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class GalleryItem(BaseModel):
    """One image found in the storage bucket."""

    id: str = Field(..., description="Storage filename")
    title: str = Field(..., description="Display title derived from the filename")
    image_url: str = Field(..., description="Public URL of the image")


class GallerySnapshot(BaseModel):
    """Latest gallery listing and when it was taken."""

    items: list[GalleryItem] = Field(default_factory=list)
    refreshed_at: datetime | None = Field(
        default=None,
        description="When the listing was last refreshed (None if never)"
    )
