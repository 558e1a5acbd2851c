from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from notes_api.core.exceptions import NotFoundError
from notes_api.core.services.note_tag_sync import NoteTagSync
from notes_api.utils.logging import get_logger

if TYPE_CHECKING:
    from notes_api.api.v1.schemas.note import NoteCreate, NoteUpdate
    from notes_api.core.models.note import Note
    from notes_api.core.repositories.note_repository import NoteRepository
    from notes_api.core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)


def _parse_id(note_id: str | UUID) -> UUID:
    try:
        return UUID(str(note_id))
    except ValueError as err:
        raise NotFoundError("note", str(note_id)) from err


class NoteService:
    """Service for managing notes with user-scoped access (RLS friendly)."""

    def __init__(self, notes: NoteRepository, tags: TagRepository) -> None:
        self._notes = notes
        self._tags = tags
        self._sync = NoteTagSync(tags)

    async def create_note(self, create_dto: NoteCreate, user_id: UUID) -> Note:
        """Insert the note, then upsert and link its tags.

        If tagging fails the note stays persisted without links and the
        ``UpstreamError`` names the failing step.
        """
        note = (
            await self._notes.create(user_id=user_id, title=create_dto.title, content=create_dto.content)
        ).unwrap("create note")

        tags = await self._sync.link(user_id=user_id, note_id=note.id, names=create_dto.tags)
        logger.info("Note created", extra={"note_id": str(note.id), "tag_count": len(tags)})
        return note.model_copy(update={"tags": tags})

    async def get_note(self, note_id: str | UUID, user_id: UUID) -> Note:
        """Return the user's note with its tags or raise ``NotFoundError``."""
        note_uuid = _parse_id(note_id)
        note = (await self._notes.get(note_uuid, user_id=user_id)).unwrap("retrieve note")
        if note is None:
            raise NotFoundError("note", str(note_id))
        return note

    async def list_notes(self, user_id: UUID, *, archived: bool | None = None, tag: str | None = None) -> list[Note]:
        """List the user's notes, newest first, optionally by archive state and tag name."""
        note_ids: list[UUID] | None = None
        if tag:
            found = (await self._tags.find_by_name(tag.strip(), user_id=user_id)).unwrap("retrieve notes")
            if found is None:
                return []
            note_ids = (await self._tags.note_ids_for_tag(found.id)).unwrap("retrieve notes")
        return (
            await self._notes.list(user_id=user_id, archived=archived, note_ids=note_ids)
        ).unwrap("retrieve notes")

    async def search_notes(self, user_id: UUID, query: str) -> list[Note]:
        # Matched as a raw substring; surrounding whitespace is part of the query
        return (await self._notes.search(user_id=user_id, query=query)).unwrap("search notes")

    async def update_note(self, note_id: str | UUID, update_dto: NoteUpdate, user_id: UUID) -> Note:
        """Update title/content and, when ``tags`` is given, replace the links.

        ``tags`` omitted or null leaves the links alone; ``[]`` removes them all.
        """
        existing = await self.get_note(note_id, user_id)

        changes = update_dto.model_dump(exclude_unset=True, exclude={"tags"})
        changes = {k: v for k, v in changes.items() if v is not None}
        changes["updated_at"] = datetime.now(UTC)

        note = (
            await self._notes.update_fields(existing.id, user_id=user_id, changes=changes)
        ).unwrap("update note")
        if note is None:
            raise NotFoundError("note", str(note_id))

        tags = existing.tags
        if update_dto.tags is not None:
            tags = await self._sync.replace(user_id=user_id, note_id=existing.id, names=update_dto.tags)
        return note.model_copy(update={"tags": tags})

    async def delete_note(self, note_id: str | UUID, user_id: UUID) -> None:
        """Delete a user's note; its links go with it through the foreign key."""
        note_uuid = _parse_id(note_id)
        deleted = (await self._notes.delete(note_uuid, user_id=user_id)).unwrap("delete note")
        if not deleted:
            raise NotFoundError("note", str(note_id))
        logger.info("Note deleted", extra={"note_id": str(note_uuid)})

    async def toggle_archive(self, note_id: str | UUID, user_id: UUID) -> Note:
        current = await self.get_note(note_id, user_id)
        note = (
            await self._notes.update_fields(
                current.id,
                user_id=user_id,
                changes={"is_archived": not current.is_archived, "updated_at": datetime.now(UTC)},
            )
        ).unwrap("toggle archive state")
        if note is None:
            raise NotFoundError("note", str(note_id))
        return note.model_copy(update={"tags": current.tags})
