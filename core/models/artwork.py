# =============================================================================
# core/models/artwork.py - Artwork and Tag Schemas
# =============================================================================
# These models define the artwork contract:
# - Tag: named label shared by many artworks
# - Artwork: portfolio piece with metadata, image URL, status and tags
# - ImageUpload: raw image file handed to the service
# - ArtworkFormData / ArtworkUpdateData: input for create / partial update
#
# Tags live in their own table and are linked through artwork_tags. An
# Artwork's `tags` list is rebuilt from that join on every read.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtworkStatus(str, Enum):
    """Sale status of an artwork."""
    AVAILABLE = "available"
    SOLD = "sold"
    RESERVED = "reserved"


# Columns of the artworks table the service writes to
ARTWORK_FIELDS = (
    "title",
    "category",
    "medium",
    "description",
    "year",
    "dimensions",
    "artist",
    "status",
    "price",
)


def normalize_tag_names(names: list[str] | None) -> list[str]:
    """
    Strip tag names, drop blanks and repeated names.

    Matching stays case-sensitive: "Blue" and "blue" are different tags.
    First occurrence wins, so submission order is kept.
    """
    result: list[str] = []
    for name in names or []:
        cleaned = name.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


class Tag(BaseModel):
    """A named label attachable to many artworks."""

    id: str = Field(..., description="Tag identifier")
    name: str = Field(..., description="Unique, case-sensitive tag name")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class Artwork(BaseModel):
    """
    A single portfolio piece.

    Example:
        {
            "id": "4b1c...",
            "title": "Moonlight",
            "image": "https://xxx.supabase.co/storage/v1/object/public/artwork-images/1718-abc.png",
            "category": "Painting",
            "medium": "Oil on canvas",
            "description": "Night scene",
            "status": "available",
            "tags": [{"id": "1", "name": "blue"}],
            "created_at": "2024-06-10T12:00:00Z"
        }
    """

    id: str
    title: str
    image: str | None = None
    category: str
    medium: str
    description: str
    year: str | None = None
    dimensions: str | None = None
    artist: str | None = None
    status: ArtworkStatus = ArtworkStatus.AVAILABLE
    price: str | None = None
    tags: list[Tag] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or ArtworkStatus.AVAILABLE

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Artwork":
        """
        Build an Artwork from a row selected with the embedded join
        `artwork_tags(tag_id, tags(id, name))`.

        The join data is flattened into `tags` and dropped from the result.
        A tag linked twice appears once.
        """
        data = {k: v for k, v in row.items() if k != "artwork_tags"}
        tags: list[Tag] = []
        seen: set[str] = set()
        for relation in row.get("artwork_tags") or []:
            tag = relation.get("tags") if isinstance(relation, dict) else None
            if not tag:
                continue
            parsed = Tag(**tag)
            if parsed.id not in seen:
                seen.add(parsed.id)
                tags.append(parsed)
        data["tags"] = tags
        return cls(**data)


class ImageUpload(BaseModel):
    """Raw image file as received from the client."""

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


class ArtworkFormData(BaseModel):
    """
    Input for creating an artwork.

    Required text fields must be non-empty; they are checked before any
    backend call is made.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, description="Title is required")
    category: str = Field(..., min_length=1, description="Category is required")
    medium: str = Field(..., min_length=1, description="Medium is required")
    description: str = Field(..., min_length=1, description="Description is required")
    image: ImageUpload | None = None
    year: str | None = None
    dimensions: str | None = None
    artist: str | None = None
    status: ArtworkStatus | None = None
    price: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return normalize_tag_names(value)

    def to_row(self, image_url: str | None) -> dict[str, Any]:
        """Column values for the artworks insert."""
        row: dict[str, Any] = {
            "title": self.title,
            "image": image_url,
            "category": self.category,
            "medium": self.medium,
            "description": self.description,
            "year": self.year,
            "dimensions": self.dimensions,
            "artist": self.artist,
            "status": (self.status or ArtworkStatus.AVAILABLE).value,
            "price": self.price,
        }
        return row


class ArtworkUpdateData(BaseModel):
    """
    Partial update of an artwork.

    Only supplied fields are written. `tags=None` and `tags=[]` both leave the
    artwork's tags untouched; a non-empty list replaces them.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    medium: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    image: ImageUpload | None = None
    year: str | None = None
    dimensions: str | None = None
    artist: str | None = None
    status: ArtworkStatus | None = None
    price: str | None = None
    tags: list[str] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return normalize_tag_names(value)

    def field_updates(self) -> dict[str, Any]:
        """Column values for the artworks update (image and tags excluded)."""
        updates = self.model_dump(
            include=set(ARTWORK_FIELDS),
            exclude_unset=True,
            exclude_none=True,
        )
        if "status" in updates:
            updates["status"] = ArtworkStatus(updates["status"]).value
        return updates


class TagCreate(BaseModel):
    """Request body for creating a tag."""

    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name must not be blank")
        return value
