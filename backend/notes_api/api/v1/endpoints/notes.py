from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Response, status

from notes_api.api.v1.schemas.note import (
    NoteCreate,
    NoteListResponse,
    NoteRead,
    NoteResponse,
    NoteUpdate,
)
from notes_api.dependencies import get_current_user, get_note_service

if TYPE_CHECKING:
    from notes_api.core.models.note import Note
    from notes_api.core.schemas.auth import AuthUser
    from notes_api.core.services.note_service import NoteService

router = APIRouter(
    responses={
        400: {"description": "Invalid input or rejected by the database"},
        401: {"description": "Unauthorized - Missing or invalid token"},
        500: {"description": "Internal server error"},
    }
)


def _envelope(message: str, note: Note) -> NoteResponse:
    return NoteResponse(message=message, note=NoteRead.model_validate(note))


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """Create a note, creating and linking any named tags that do not exist yet."""
    note = await service.create_note(payload, user_id=current_user.id)
    return _envelope("Note created successfully.", note)


@router.get("", response_model=NoteListResponse)
async def list_notes(
    archived: bool | None = Query(default=None, description="Filter by archived status"),
    tag: str | None = Query(default=None, description="Only notes linked to this tag name"),
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    notes = await service.list_notes(current_user.id, archived=archived, tag=tag)
    return NoteListResponse(
        message="Notes retrieved successfully.",
        notes=[NoteRead.model_validate(n) for n in notes],
    )


@router.get("/search", response_model=NoteListResponse)
async def search_notes(
    q: str = Query(..., min_length=1, description="Text to look for in title or content"),
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """Case-insensitive substring search over the caller's notes."""
    notes = await service.search_notes(current_user.id, q)
    return NoteListResponse(
        message="Search results retrieved successfully.",
        notes=[NoteRead.model_validate(n) for n in notes],
    )


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    return _envelope("Note retrieved successfully.", note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """Update a note. A ``tags`` list replaces every link; ``[]`` clears them."""
    note = await service.update_note(note_id, payload, user_id=current_user.id)
    return _envelope("Note updated successfully.", note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_note(
    note_id: str,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    await service.delete_note(note_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{note_id}/toggle-archive", response_model=NoteResponse)
async def toggle_archive_note(
    note_id: str,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.toggle_archive(note_id, user_id=current_user.id)
    state = "archived" if note.is_archived else "unarchived"
    return _envelope(f"Note archive state changed to {state}.", note)
