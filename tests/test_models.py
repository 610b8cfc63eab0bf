# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the domain models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Join rows are flattened into tags
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    Artwork,
    ArtworkFormData,
    ArtworkStatus,
    ArtworkUpdateData,
    ContactMessage,
    ContactResult,
    GallerySnapshot,
    Tag,
    TagCreate,
    normalize_tag_names,
)


# =============================================================================
# Tag Name Tests
# =============================================================================

class TestNormalizeTagNames:
    """Tests for tag name clean-up."""

    def test_strips_and_drops_blanks(self):
        assert normalize_tag_names([" blue ", "", "   ", "night"]) == ["blue", "night"]

    def test_drops_repeats_keeping_order(self):
        assert normalize_tag_names(["night", "blue", "night"]) == ["night", "blue"]

    def test_case_sensitive(self):
        assert normalize_tag_names(["Blue", "blue"]) == ["Blue", "blue"]

    def test_none(self):
        assert normalize_tag_names(None) == []


class TestTagCreate:
    def test_strips_name(self):
        assert TagCreate(name="  abstract ").name == "abstract"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            TagCreate(name="   ")


# =============================================================================
# Artwork Tests
# =============================================================================

class TestArtworkFromRow:
    """Tests for building an Artwork from a joined row."""

    def _row(self, **overrides):
        row = {
            "id": 7,
            "title": "Moonlight",
            "image": "https://x.supabase.co/storage/v1/object/public/artwork-images/1-abc.png",
            "category": "Painting",
            "medium": "Oil on canvas",
            "description": "Night scene",
            "status": "sold",
            "created_at": "2024-06-10T12:00:00+00:00",
            "artwork_tags": [
                {"tag_id": 1, "tags": {"id": 1, "name": "blue"}},
                {"tag_id": 2, "tags": {"id": 2, "name": "night"}},
            ],
        }
        row.update(overrides)
        return row

    def test_flattens_tags(self):
        artwork = Artwork.from_row(self._row())

        assert artwork.id == "7"
        assert [t.name for t in artwork.tags] == ["blue", "night"]
        assert artwork.tags[0].id == "1"
        assert artwork.status == ArtworkStatus.SOLD
        assert "artwork_tags" not in artwork.model_dump()

    def test_duplicate_links_appear_once(self):
        row = self._row(artwork_tags=[
            {"tag_id": 1, "tags": {"id": 1, "name": "blue"}},
            {"tag_id": 1, "tags": {"id": 1, "name": "blue"}},
        ])
        assert len(Artwork.from_row(row).tags) == 1

    def test_missing_join_and_status(self):
        artwork = Artwork.from_row(self._row(artwork_tags=None, status=None))

        assert artwork.tags == []
        assert artwork.status == ArtworkStatus.AVAILABLE

    def test_dangling_link_skipped(self):
        artwork = Artwork.from_row(self._row(artwork_tags=[{"tag_id": 9, "tags": None}]))
        assert artwork.tags == []


class TestArtworkFormData:
    """Tests for create-form validation."""

    @pytest.mark.parametrize("field", ["title", "category", "medium", "description"])
    def test_required_field_must_be_non_empty(self, field):
        data = {"title": "A", "category": "B", "medium": "C", "description": "D", field: "  "}
        with pytest.raises(ValidationError):
            ArtworkFormData(**data)

    def test_to_row_defaults_status(self):
        form = ArtworkFormData(title="A", category="B", medium="C", description="D")
        row = form.to_row("https://img")

        assert row["status"] == "available"
        assert row["image"] == "https://img"
        assert "tags" not in row

    def test_tags_normalized(self):
        form = ArtworkFormData(
            title="A", category="B", medium="C", description="D",
            tags=["blue", " blue", "", "Night"],
        )
        assert form.tags == ["blue", "Night"]


class TestArtworkUpdateData:
    def test_field_updates_only_supplied(self):
        data = ArtworkUpdateData(title="New", status="reserved")
        assert data.field_updates() == {"title": "New", "status": "reserved"}

    def test_empty_tags_kept_as_empty_list(self):
        assert ArtworkUpdateData(tags=[]).tags == []
        assert ArtworkUpdateData().tags is None

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            ArtworkUpdateData(status="lost")


# =============================================================================
# Contact / Gallery Tests
# =============================================================================

class TestContactModels:
    def test_missing_fields(self):
        message = ContactMessage(name="Ada", email=" ", message="")
        assert message.missing_fields() == ["email", "message"]

    def test_result_form_defaults_empty(self):
        result = ContactResult(success=True, message="ok")
        assert result.form.model_dump() == {"name": "", "email": "", "message": ""}


def test_gallery_snapshot_defaults():
    snapshot = GallerySnapshot()
    assert snapshot.items == []
    assert snapshot.refreshed_at is None


def test_tag_coerces_id():
    assert Tag(id=3, name="x").id == "3"
