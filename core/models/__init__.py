# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - artwork.py: Artwork, Tag and the create/update inputs
# - gallery.py: Storage-backed gallery listing
# - contact.py: Contact form message and result
#
# These models define the "contract" between API and clients.
# =============================================================================

from .artwork import (
    ARTWORK_FIELDS,
    Artwork,
    ArtworkFormData,
    ArtworkStatus,
    ArtworkUpdateData,
    ImageUpload,
    Tag,
    TagCreate,
    normalize_tag_names,
)
from .contact import (
    CONTACT_SUCCESS_MESSAGE,
    ContactFormState,
    ContactMessage,
    ContactResult,
)
from .gallery import GalleryItem, GallerySnapshot

__all__ = [
    # Artwork
    "ARTWORK_FIELDS",
    "Artwork",
    "ArtworkFormData",
    "ArtworkStatus",
    "ArtworkUpdateData",
    "ImageUpload",
    "Tag",
    "TagCreate",
    "normalize_tag_names",
    # Contact
    "CONTACT_SUCCESS_MESSAGE",
    "ContactFormState",
    "ContactMessage",
    "ContactResult",
    # Gallery
    "GalleryItem",
    "GallerySnapshot",
]
