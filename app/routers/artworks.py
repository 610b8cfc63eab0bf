# =============================================================================
# app/routers/artworks.py - Artwork CRUD Endpoints
# =============================================================================
# Public reads for the landing page, authenticated writes for the admin UI.
# Create and update take multipart form data so the image travels with the
# metadata.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.exceptions import (
    ArtworkDeleteError,
    ArtworkNotFoundError,
    ArtworkSaveError,
    FileTooLargeError,
    InvalidFileTypeError,
    MissingImageError,
)
from core.models.artwork import (
    Artwork,
    ArtworkFormData,
    ArtworkStatus,
    ArtworkUpdateData,
    ImageUpload,
)
from core.services.artwork_service import ArtworkService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================

def _has_file(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)


async def _read_image(upload: UploadFile) -> ImageUpload:
    """Validate extension and size of an uploaded image and read it."""
    filename = upload.filename or ""
    file_ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if file_ext not in settings.allowed_extensions_list:
        raise InvalidFileTypeError(filename, settings.allowed_extensions_list)

    content = await upload.read()
    size_bytes = len(content)
    if size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    return ImageUpload(
        filename=filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


def _build(model, **values):
    """Instantiate an input model, reporting problems as a 422."""
    try:
        return model(**values)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False, include_input=False))


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=list[Artwork])
async def list_artworks():
    """
    List all artworks, newest first, with their tags.

    An unreachable backend yields an empty list.
    """
    return ArtworkService.fetch_artworks()


@router.get("/{artwork_id}", response_model=Artwork)
async def get_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
):
    """Get one artwork with its tags."""
    artwork = ArtworkService.fetch_artwork_by_id(artwork_id)
    if artwork is None:
        raise ArtworkNotFoundError(artwork_id)
    return artwork


@router.post("", response_model=Artwork, status_code=201)
async def create_artwork(
    title: Annotated[str, Form()],
    category: Annotated[str, Form()],
    medium: Annotated[str, Form()],
    description: Annotated[str, Form()],
    image: Annotated[UploadFile | None, File(description="Artwork image")] = None,
    year: Annotated[str | None, Form()] = None,
    dimensions: Annotated[str | None, Form()] = None,
    artist: Annotated[str | None, Form()] = None,
    status: Annotated[ArtworkStatus | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    tags: Annotated[list[str] | None, Form(description="Tag names (repeat the field)")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create an artwork.

    1. Validates required fields and the image (before any backend call)
    2. Uploads the image
    3. Inserts the artwork and links its tags, creating new tags as needed

    Returns the created artwork with its tags.
    """
    values = dict(
        title=title,
        category=category,
        medium=medium,
        description=description,
        year=year,
        dimensions=dimensions,
        artist=artist,
        status=status,
        price=price,
        tags=tags or [],
    )
    # required text fields are checked before the image
    _build(ArtworkFormData, **values)

    if not _has_file(image):
        raise MissingImageError()

    form = _build(ArtworkFormData, image=await _read_image(image), **values)

    logger.info(f"User {user.id} creating artwork '{form.title}'")
    artwork = ArtworkService.create_artwork(form)
    if artwork is None:
        raise ArtworkSaveError()
    return artwork


@router.patch("/{artwork_id}", response_model=Artwork)
async def update_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    image: Annotated[UploadFile | None, File(description="Replacement image")] = None,
    title: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    medium: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    year: Annotated[str | None, Form()] = None,
    dimensions: Annotated[str | None, Form()] = None,
    artist: Annotated[str | None, Form()] = None,
    status: Annotated[ArtworkStatus | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    tags: Annotated[list[str] | None, Form(description="Replacement tag names")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update an artwork.

    Only supplied fields change. Supplying tags replaces all of the
    artwork's tags; omitting them keeps the current ones.
    """
    supplied = {
        key: value
        for key, value in dict(
            title=title,
            category=category,
            medium=medium,
            description=description,
            year=year,
            dimensions=dimensions,
            artist=artist,
            status=status,
            price=price,
            tags=tags,
        ).items()
        if value is not None
    }
    if _has_file(image):
        supplied["image"] = await _read_image(image)

    data = _build(ArtworkUpdateData, **supplied)

    if ArtworkService.fetch_artwork_by_id(artwork_id) is None:
        raise ArtworkNotFoundError(artwork_id)

    logger.info(f"User {user.id} updating artwork {artwork_id}")
    artwork = ArtworkService.update_artwork(artwork_id, data)
    if artwork is None:
        raise ArtworkSaveError()
    return artwork


@router.delete("/{artwork_id}")
async def delete_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete an artwork.

    The image file is removed best-effort; a storage failure does not fail
    the request.
    """
    logger.info(f"User {user.id} deleting artwork {artwork_id}")
    if not ArtworkService.delete_artwork(artwork_id):
        raise ArtworkDeleteError(artwork_id)
    return {"deleted": True, "artwork_id": artwork_id}
