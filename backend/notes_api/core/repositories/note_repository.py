from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notes_api.core.models.note import Note
    from notes_api.db.outcome import Outcome


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Contract used by services and dependency injection. Implementations perform
    network I/O, so methods are async, and every call returns an ``Outcome``
    instead of raising on remote failures. All reads and writes are scoped to
    the owning ``user_id``.
    """

    @abstractmethod
    async def create(self, *, user_id: UUID, title: str, content: str) -> Outcome[Note]:  # pragma: no cover - interface only
        """Insert a note row and return the stored entity (without tags)."""

    @abstractmethod
    async def get(self, note_id: UUID, *, user_id: UUID) -> Outcome[Note | None]:  # pragma: no cover
        """Fetch a note with its linked tags, or None if the user has no such note."""

    @abstractmethod
    async def list(
        self,
        *,
        user_id: UUID,
        archived: bool | None = None,
        note_ids: Sequence[UUID] | None = None,
    ) -> Outcome[list[Note]]:  # pragma: no cover
        """Return the user's notes with tags, newest first.

        Args:
            user_id: Owner of the notes
            archived: Optional filter on ``is_archived``
            note_ids: Optional restriction to these ids
        """

    @abstractmethod
    async def search(self, *, user_id: UUID, query: str) -> Outcome[list[Note]]:  # pragma: no cover
        """Case-insensitive substring match on title or content."""

    @abstractmethod
    async def update_fields(self, note_id: UUID, *, user_id: UUID, changes: dict[str, Any]) -> Outcome[Note | None]:  # pragma: no cover
        """Partially update a note and return the updated row (without tags), or None if missing."""

    @abstractmethod
    async def delete(self, note_id: UUID, *, user_id: UUID) -> Outcome[bool]:  # pragma: no cover
        """Delete a note. The value is True if a row was removed."""
