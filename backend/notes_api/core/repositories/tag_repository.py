from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notes_api.core.models.tag import Tag
    from notes_api.db.outcome import Outcome


class TagRepository(ABC):
    """Abstract repository over the ``tags`` and ``note_tags`` tables."""

    @abstractmethod
    async def create(self, *, user_id: UUID, name: str) -> Outcome[Tag]:  # pragma: no cover - interface only
        """Insert a single tag row."""

    @abstractmethod
    async def get(self, tag_id: UUID, *, user_id: UUID) -> Outcome[Tag | None]:  # pragma: no cover
        """Fetch one of the user's tags by id."""

    @abstractmethod
    async def find_by_name(self, name: str, *, user_id: UUID) -> Outcome[Tag | None]:  # pragma: no cover
        """Fetch one of the user's tags by exact name."""

    @abstractmethod
    async def list(self, *, user_id: UUID) -> Outcome[list[Tag]]:  # pragma: no cover
        """Return the user's tags ordered by name."""

    @abstractmethod
    async def upsert_many(self, names: Sequence[str], *, user_id: UUID) -> Outcome[list[Tag]]:  # pragma: no cover
        """Insert-or-reuse tags keyed on ``(user_id, name)`` in one batched call.

        ``names`` must already be distinct. Returns one tag per name, existing
        rows included.
        """

    @abstractmethod
    async def link(self, note_id: UUID, tag_ids: Sequence[UUID]) -> Outcome[None]:  # pragma: no cover
        """Insert one ``note_tags`` row per tag id."""

    @abstractmethod
    async def unlink_all(self, note_id: UUID) -> Outcome[None]:  # pragma: no cover
        """Delete every ``note_tags`` row of a note."""

    @abstractmethod
    async def note_ids_for_tag(self, tag_id: UUID) -> Outcome[list[UUID]]:  # pragma: no cover
        """Return the ids of notes linked to a tag."""

    @abstractmethod
    async def reassign_links(self, tag_id: UUID, new_tag_id: UUID) -> Outcome[int]:  # pragma: no cover
        """Move every link of ``tag_id`` to ``new_tag_id``.

        Notes already linked to ``new_tag_id`` end up with a single link. The
        value is the number of notes that were linked to ``tag_id``.
        """

    @abstractmethod
    async def delete(self, tag_id: UUID, *, user_id: UUID) -> Outcome[bool]:  # pragma: no cover
        """Delete a tag row. The value is True if a row was removed."""
