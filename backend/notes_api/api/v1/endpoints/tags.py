from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, Query, Response, status

from notes_api.api.v1.schemas.tag import TagCreate, TagDeleteResponse, TagRead, TagResponse
from notes_api.dependencies import get_current_user, get_tag_service

if TYPE_CHECKING:
    from notes_api.core.schemas.auth import AuthUser
    from notes_api.core.services.tag_service import TagService

router = APIRouter(
    responses={
        401: {"description": "Unauthorized - Missing or invalid token"},
        500: {"description": "Internal server error"},
    }
)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    payload: TagCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    tag = await service.create_tag(current_user.id, payload.name)
    return TagResponse(message="Tag created successfully", tag=TagRead.model_validate(tag))


@router.get("", response_model=list[TagRead])
async def list_tags(
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    tags = await service.list_tags(current_user.id)
    return [TagRead.model_validate(t) for t in tags]


@router.delete(
    "/{tag_id}",
    response_model=None,
    responses={
        200: {"model": TagDeleteResponse, "description": "Deleted after reassigning notes"},
        204: {"description": "Deleted"},
        400: {"description": "Invalid replacement tag"},
        404: {"description": "Tag not found"},
    },
)
async def delete_tag(
    tag_id: str,
    new_tag_id: UUID | None = Query(default=None, alias="newTagId", description="Tag that inherits the notes"),
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    """Delete a tag, optionally moving its notes to ``newTagId`` first."""
    removal = await service.delete_tag(current_user.id, tag_id, new_tag_id=new_tag_id)
    if removal.replacement_tag_id is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    message = "Tag deleted successfully"
    if removal.reassignment_error:
        message = "Tag deleted, but its notes could not be reassigned"
    return TagDeleteResponse(
        message=message,
        tag_id=removal.tag_id,
        replacement_tag_id=removal.replacement_tag_id,
        reassigned_notes=removal.reassigned_notes,
        reassignment_error=removal.reassignment_error,
    )
