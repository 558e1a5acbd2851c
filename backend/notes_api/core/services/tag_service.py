from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from notes_api.core.exceptions import NotFoundError, UpstreamError, ValidationError
from notes_api.utils.logging import get_logger

if TYPE_CHECKING:
    from notes_api.core.models.tag import Tag
    from notes_api.core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)

STEP_REASSIGN = "reassign tag links"
STEP_DELETE = "delete tag"


@dataclass(frozen=True)
class TagRemoval:
    """What happened when a tag was removed."""

    tag_id: UUID
    replacement_tag_id: UUID | None = None
    reassigned_notes: int = 0
    reassignment_error: str | None = None


class TagService:
    """Service for a user's tags."""

    def __init__(self, tags: TagRepository) -> None:
        self._tags = tags

    async def create_tag(self, user_id: UUID, name: str) -> Tag:
        name = name.strip()
        existing = (await self._tags.find_by_name(name, user_id=user_id)).unwrap("check tag")
        if existing is not None:
            raise ValidationError("Tag already exists")
        # A concurrent insert of the same name still fails on the unique constraint (400)
        return (await self._tags.create(user_id=user_id, name=name)).unwrap("create tag")

    async def list_tags(self, user_id: UUID) -> list[Tag]:
        return (await self._tags.list(user_id=user_id)).unwrap("retrieve tags")

    async def delete_tag(self, user_id: UUID, tag_id: str | UUID, new_tag_id: UUID | None = None) -> TagRemoval:
        """Delete a tag, first moving its notes to ``new_tag_id`` when given.

        Reassignment and deletion are independent steps: a failed reassignment
        is logged and reported on the result, and the delete is still attempted.
        A failed delete raises ``UpstreamError``.
        """
        try:
            tag_uuid = UUID(str(tag_id))
        except ValueError as err:
            raise NotFoundError("tag", str(tag_id)) from err

        tag = (await self._tags.get(tag_uuid, user_id=user_id)).unwrap("retrieve tag")
        if tag is None:
            raise NotFoundError("tag", str(tag_id))

        reassigned = 0
        reassignment_error: str | None = None
        if new_tag_id is not None:
            if new_tag_id == tag_uuid:
                raise ValidationError("Replacement tag must differ from the tag being deleted")
            replacement = (await self._tags.get(new_tag_id, user_id=user_id)).unwrap("retrieve tag")
            if replacement is None:
                raise ValidationError("Replacement tag not found")

            outcome = await self._tags.reassign_links(tag_uuid, new_tag_id)
            if outcome.ok:
                reassigned = outcome.value or 0
            else:
                reassignment_error = UpstreamError.from_remote(STEP_REASSIGN, outcome.error).message
                logger.warning(
                    "Tag reassignment failed, deleting anyway",
                    extra={"tag_id": str(tag_uuid), "new_tag_id": str(new_tag_id), "error": reassignment_error},
                )

        (await self._tags.delete(tag_uuid, user_id=user_id)).unwrap(STEP_DELETE)
        logger.info(
            "Tag deleted",
            extra={"tag_id": str(tag_uuid), "new_tag_id": str(new_tag_id) if new_tag_id else None, "reassigned": reassigned},
        )
        return TagRemoval(
            tag_id=tag_uuid,
            replacement_tag_id=new_tag_id,
            reassigned_notes=reassigned,
            reassignment_error=reassignment_error,
        )
