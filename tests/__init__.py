# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Artfolio API:
# - fakes.py: In-memory Supabase client used by the fixtures
# - test_models.py: Pydantic model validation
# - test_artwork_service.py: Artwork/tag operations and rollback
# - test_gallery.py / test_contact.py / test_auth.py: remaining services
# - test_api.py: Endpoint tests through TestClient
#
# Run tests with: pytest
# =============================================================================
