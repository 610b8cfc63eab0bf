# =============================================================================
# app/routers/tags.py - Tag Endpoints
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.exceptions import TagCreateError
from core.models.artwork import Tag, TagCreate
from core.services.artwork_service import ArtworkService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Tag])
async def list_tags():
    """List all tags ordered by name (used for tag suggestions in the admin form)."""
    return ArtworkService.fetch_tags()


@router.post("", response_model=Tag, status_code=201)
async def create_tag(
    request: TagCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a tag.

    Creating a name that already exists returns the existing tag.
    """
    tag = ArtworkService.create_tag(request.name)
    if tag is None:
        raise TagCreateError(request.name)
    return tag
