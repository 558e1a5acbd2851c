from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notes_api.core.models.note import Note
from notes_api.core.repositories.note_repository import NoteRepository
from notes_api.db.outcome import Outcome

from .base import SupabaseRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notes_api.core.models.tag import Tag


class SupabaseNoteRepository(SupabaseRepository, NoteRepository):
    """Supabase implementation of the NoteRepository.

    Uses Supabase's PostgREST client for CRUD. Linked tags are read through a
    resource embedding over ``note_tags``; writes touch the ``notes`` table only.
    """

    TABLE_NAME = "notes"
    NOTE_COLUMNS = ("id", "title", "content", "user_id", "is_archived", "created_at", "updated_at")
    SELECT_WITH_TAGS = "*, note_tags(tag:tags(id, name, user_id, created_at))"
    IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at"})

    async def create(self, *, user_id: UUID, title: str, content: str) -> Outcome[Note]:
        row = {"title": title, "content": content, "user_id": str(user_id)}
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .insert(row)
            .execute()
        )
        return self._inserted(outcome).map(self._row_to_note)

    async def get(self, note_id: UUID, *, user_id: UUID) -> Outcome[Note | None]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .select(self.SELECT_WITH_TAGS)
            .eq("id", str(note_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return outcome.map(self._first_note)

    async def list(
        self,
        *,
        user_id: UUID,
        archived: bool | None = None,
        note_ids: Sequence[UUID] | None = None,
    ) -> Outcome[list[Note]]:
        if note_ids is not None and not note_ids:
            return Outcome.success([])

        def _query():
            q = (
                self._client.table(self.TABLE_NAME)
                .select(self.SELECT_WITH_TAGS)
                .eq("user_id", str(user_id))
            )
            if archived is not None:
                q = q.eq("is_archived", archived)
            if note_ids is not None:
                q = q.in_("id", [str(i) for i in note_ids])
            return q.order("created_at", desc=True).execute()

        outcome = await self._run(_query)
        return outcome.map(self._all_notes)

    async def search(self, *, user_id: UUID, query: str) -> Outcome[list[Note]]:
        pattern = self._ilike_value(query)
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .select(self.SELECT_WITH_TAGS)
            .eq("user_id", str(user_id))
            .or_(f"title.ilike.{pattern},content.ilike.{pattern}")
            .order("created_at", desc=True)
            .execute()
        )
        return outcome.map(self._all_notes)

    async def update_fields(self, note_id: UUID, *, user_id: UUID, changes: dict[str, Any]) -> Outcome[Note | None]:
        # Never let a caller move a note to another owner or rewrite its identity
        sanitized = {k: v for k, v in (changes or {}).items() if k not in self.IMMUTABLE_FIELDS and k != "tags"}
        if not sanitized:
            return await self.get(note_id, user_id=user_id)

        payload = self._to_json(sanitized)
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .update(payload)
            .eq("id", str(note_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return outcome.map(self._first_note)

    async def delete(self, note_id: UUID, *, user_id: UUID) -> Outcome[bool]:
        outcome = await self._run(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(note_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return outcome.map(lambda resp: len(self._rows(resp)) > 0)

    def _first_note(self, resp: Any) -> Note | None:
        rows = self._rows(resp)
        if not rows:
            return None
        return self._row_to_note(rows[0])

    def _all_notes(self, resp: Any) -> list[Note]:
        return [self._row_to_note(r) for r in self._rows(resp)]

    @staticmethod
    def _ilike_value(query: str) -> str:
        """Quote a search term for use inside a PostgREST ``or`` filter.

        Commas, dots and parentheses are filter syntax, so the value is wrapped
        in double quotes with quotes and backslashes escaped.
        """
        escaped = query.replace("\\", "\\\\").replace('"', '\\"')
        return f'"%{escaped}%"'

    @classmethod
    def _row_to_note(cls, row: dict[str, Any]) -> Note:
        normalized = {k: row[k] for k in cls.NOTE_COLUMNS if k in row}
        if normalized.get("content") is None:
            normalized["content"] = ""

        tags: list[Tag] = []
        for link in row.get("note_tags") or []:
            tag_row = link.get("tag") if isinstance(link, dict) else None
            if tag_row:
                tags.append(cls._row_to_tag(tag_row))
        normalized["tags"] = sorted(tags, key=lambda t: t.name)
        return Note.model_validate(normalized)
