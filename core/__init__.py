# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the portfolio's business logic:
# - models/: Pydantic schemas for artworks, tags, gallery and contact
# - services/: Artwork, storage, gallery, contact and auth services
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
