# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .artwork_service import ArtworkService
from .auth_service import AuthService
from .contact_service import ContactService
from .gallery_service import GalleryRefresher, GalleryService
from .storage_service import StorageService

__all__ = [
    "ArtworkService",
    "AuthService",
    "ContactService",
    "GalleryRefresher",
    "GalleryService",
    "StorageService",
]
