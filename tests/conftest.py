# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the shared Supabase client for an in-memory fake
# - Provides an API client with authentication overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("CONTACT_WEBHOOK_URL", "https://forms.example.com/f/test-form")
os.environ.setdefault("STORAGE_BUCKET", "artwork-images")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from uuid import UUID

import pytest

from lib.supabase_client import SupabaseClient
from core.models.artwork import ArtworkFormData, ImageUpload
from tests.fakes import FakeSupabase

TEST_USER_ID = UUID("6f1c2a8e-1d2b-4c3a-9e8f-0a1b2c3d4e5f")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """In-memory Supabase installed as the shared client."""
    fake = FakeSupabase()
    SupabaseClient.set_client(fake)
    yield fake
    SupabaseClient.set_client(None)


@pytest.fixture
def png_image():
    """A small PNG upload."""
    return ImageUpload(
        filename="moon.png",
        content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 64,
        content_type="image/png",
    )


@pytest.fixture
def moonlight_form(png_image):
    """Create-form data for the "Moonlight" painting."""
    return ArtworkFormData(
        title="Moonlight",
        category="Painting",
        medium="Oil on canvas",
        description="Night scene",
        image=png_image,
        tags=["blue", "night"],
    )


@pytest.fixture
def auth_user():
    from app.auth.models import AuthUser

    return AuthUser(id=TEST_USER_ID, email="artist@example.com", name="Artist")


@pytest.fixture
def api_client(fake_supabase, auth_user):
    """
    TestClient with get_current_user overridden.

    The app lifespan is not entered, so no background gallery refresh runs.
    """
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: auth_user
    app.state.gallery_refresher = None
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
    app.state.gallery_refresher = None


@pytest.fixture
def anonymous_client(fake_supabase):
    """TestClient without any auth override."""
    from fastapi.testclient import TestClient

    from app.main import app

    app.dependency_overrides.clear()
    app.state.gallery_refresher = None
    return TestClient(app)
