from __future__ import annotations

from typing import TYPE_CHECKING

from notes_api.core.models.tag import normalize_tag_names
from notes_api.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from notes_api.core.models.tag import Tag
    from notes_api.core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)

STEP_UPSERT_TAGS = "associate tags"
STEP_CLEAR_LINKS = "clear note tags"
STEP_LINK_TAGS = "link tags to note"


class NoteTagSync:
    """Keep a note's ``note_tags`` rows equal to a list of tag names.

    Each step is one remote call; a failing step raises ``UpstreamError`` naming
    it and the remaining steps are skipped. Nothing is rolled back, so a note
    written before a failed sync keeps whatever links it had at that point.
    """

    def __init__(self, tags: TagRepository) -> None:
        self._tags = tags

    async def link(self, *, user_id: UUID, note_id: UUID, names: Iterable[str] | None) -> list[Tag]:
        """Link a freshly created note to its tags. No names, no remote calls."""
        wanted = normalize_tag_names(names)
        if not wanted:
            return []
        tags = await self._resolve(user_id, wanted)
        (await self._tags.link(note_id, [t.id for t in tags])).unwrap(STEP_LINK_TAGS)
        return tags

    async def replace(self, *, user_id: UUID, note_id: UUID, names: Iterable[str]) -> list[Tag]:
        """Replace every link of an existing note. An empty list clears them all.

        Tags are upserted before the old links are dropped so that an upsert
        failure leaves the previous links in place.
        """
        wanted = normalize_tag_names(names)
        tags = await self._resolve(user_id, wanted) if wanted else []
        (await self._tags.unlink_all(note_id)).unwrap(STEP_CLEAR_LINKS)
        if tags:
            (await self._tags.link(note_id, [t.id for t in tags])).unwrap(STEP_LINK_TAGS)
        logger.debug("Replaced tags of note %s with %s", note_id, [t.name for t in tags])
        return tags

    async def _resolve(self, user_id: UUID, names: list[str]) -> list[Tag]:
        return (await self._tags.upsert_many(names, user_id=user_id)).unwrap(STEP_UPSERT_TAGS)
