# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - artworks.py: Artwork listing and admin CRUD
# - tags.py: Tag listing and creation
# - gallery.py: Storage-backed gallery listing
# - contact.py: Contact form submission
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import artworks
from . import tags
from . import gallery
from . import contact

__all__ = [
    "health",
    "artworks",
    "tags",
    "gallery",
    "contact",
]
