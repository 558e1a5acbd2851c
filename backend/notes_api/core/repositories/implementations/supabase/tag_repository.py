from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from notes_api.core.models.tag import Tag
from notes_api.core.repositories.tag_repository import TagRepository
from notes_api.db.outcome import Outcome

from .base import SupabaseRepository

if TYPE_CHECKING:
    from collections.abc import Sequence


class SupabaseTagRepository(SupabaseRepository, TagRepository):
    """Supabase implementation of the TagRepository.

    Assumes a unique constraint on ``tags(user_id, name)`` and a primary key on
    ``note_tags(note_id, tag_id)``; both are used as upsert conflict targets.
    """

    TABLE_NAME = "tags"
    LINK_TABLE_NAME = "note_tags"

    async def create(self, *, user_id: UUID, name: str) -> Outcome[Tag]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .insert({"name": name, "user_id": str(user_id)})
            .execute()
        )
        return self._inserted(outcome).map(self._row_to_tag)

    async def get(self, tag_id: UUID, *, user_id: UUID) -> Outcome[Tag | None]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("id", str(tag_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return outcome.map(self._first_tag)

    async def find_by_name(self, name: str, *, user_id: UUID) -> Outcome[Tag | None]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("name", name)
            .limit(1)
            .execute()
        )
        return outcome.map(self._first_tag)

    async def list(self, *, user_id: UUID) -> Outcome[list[Tag]]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("user_id", str(user_id))
            .order("name")
            .execute()
        )
        return outcome.map(lambda resp: [self._row_to_tag(r) for r in self._rows(resp)])

    async def upsert_many(self, names: Sequence[str], *, user_id: UUID) -> Outcome[list[Tag]]:
        if not names:
            return Outcome.success([])
        rows = [{"user_id": str(user_id), "name": name} for name in names]
        # merge-duplicates so existing rows come back alongside inserted ones
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .upsert(rows, on_conflict="user_id,name")
            .execute()
        )

        def _in_request_order(resp: Any) -> list[Tag]:
            by_name = {r["name"]: self._row_to_tag(r) for r in self._rows(resp)}
            return [by_name[n] for n in names if n in by_name]

        return outcome.map(_in_request_order)

    async def link(self, note_id: UUID, tag_ids: Sequence[UUID]) -> Outcome[None]:
        if not tag_ids:
            return Outcome.success(None)
        rows = [{"note_id": str(note_id), "tag_id": str(tag_id)} for tag_id in tag_ids]
        outcome = await self._run(
            lambda: self._client.table(self.LINK_TABLE_NAME)
            .insert(rows)
            .execute()
        )
        return outcome.map(lambda _: None)

    async def unlink_all(self, note_id: UUID) -> Outcome[None]:
        outcome = await self._run(
            lambda: self._client.table(self.LINK_TABLE_NAME)
            .delete()
            .eq("note_id", str(note_id))
            .execute()
        )
        return outcome.map(lambda _: None)

    async def note_ids_for_tag(self, tag_id: UUID) -> Outcome[list[UUID]]:
        outcome = await self._run(
            lambda: self._client.table(self.LINK_TABLE_NAME)
            .select("note_id")
            .eq("tag_id", str(tag_id))
            .execute()
        )
        return outcome.map(lambda resp: [UUID(str(r["note_id"])) for r in self._rows(resp)])

    async def reassign_links(self, tag_id: UUID, new_tag_id: UUID) -> Outcome[int]:
        linked = await self.note_ids_for_tag(tag_id)
        if not linked.ok:
            return Outcome.failure(linked.error)
        note_ids = linked.value or []
        if not note_ids:
            return Outcome.success(0)

        rows = [{"note_id": str(n), "tag_id": str(new_tag_id)} for n in note_ids]
        # A plain UPDATE of tag_id would hit the primary key for notes that
        # already carry the replacement tag
        moved = await self._run(
            lambda: self._client.table(self.LINK_TABLE_NAME)
            .upsert(rows, on_conflict="note_id,tag_id", ignore_duplicates=True)
            .execute()
        )
        if not moved.ok:
            return Outcome.failure(moved.error)

        # Only the links that were copied; one added after the read stays on
        # the old tag and is not reassigned
        cleared = await self._run(
            lambda: self._client.table(self.LINK_TABLE_NAME)
            .delete()
            .eq("tag_id", str(tag_id))
            .in_("note_id", [str(n) for n in note_ids])
            .execute()
        )
        return cleared.map(lambda _: len(note_ids))

    async def delete(self, tag_id: UUID, *, user_id: UUID) -> Outcome[bool]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(tag_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return outcome.map(lambda resp: len(self._rows(resp)) > 0)

    def _first_tag(self, resp: Any) -> Tag | None:
        rows = self._rows(resp)
        if not rows:
            return None
        return self._row_to_tag(rows[0])
