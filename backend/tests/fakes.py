"""In-memory stand-ins for the Supabase repositories.

The fake store mirrors the constraints of ``supabase/migrations``: a unique
``(user_id, name)`` on tags, a ``(note_id, tag_id)`` primary key on links and
``ON DELETE CASCADE`` from notes and tags to links. Any operation can be told
to fail through ``FakeStore.fail`` so partial-failure paths can be exercised.
"""
from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from notes_api.core.models.note import Note
from notes_api.core.models.tag import Tag
from notes_api.core.repositories.note_repository import NoteRepository
from notes_api.core.repositories.tag_repository import TagRepository
from notes_api.db.outcome import Outcome, RemoteError

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class FakeStore:
    def __init__(self) -> None:
        self.notes: dict[UUID, dict] = {}
        self.tags: dict[UUID, dict] = {}
        self.links: list[tuple[UUID, UUID]] = []
        self.calls: list[str] = []
        self._failures: dict[str, RemoteError] = {}
        self._clock = itertools.count()

    def fail(self, operation: str, message: str = "connection reset", code: str | None = "XX000") -> None:
        self._failures[operation] = RemoteError(message=message, code=code)

    def recover(self, operation: str) -> None:
        self._failures.pop(operation, None)

    def record(self, operation: str) -> RemoteError | None:
        self.calls.append(operation)
        return self._failures.get(operation)

    def now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._clock))

    def tag_names_for(self, note_id: UUID) -> list[str]:
        return sorted(self.tags[t]["name"] for n, t in self.links if n == note_id)

    def tag_rows_named(self, user_id: UUID, name: str) -> list[dict]:
        return [t for t in self.tags.values() if t["user_id"] == user_id and t["name"] == name]


class FakeNoteRepository(NoteRepository):
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def create(self, *, user_id, title, content):
        if err := self.store.record("notes.create"):
            return Outcome.failure(err)
        note_id = uuid4()
        self.store.notes[note_id] = {
            "id": note_id,
            "title": title,
            "content": content,
            "user_id": user_id,
            "is_archived": False,
            "created_at": self.store.now(),
            "updated_at": None,
        }
        return Outcome.success(Note.model_validate(self.store.notes[note_id]))

    async def get(self, note_id, *, user_id):
        if err := self.store.record("notes.get"):
            return Outcome.failure(err)
        row = self.store.notes.get(note_id)
        if row is None or row["user_id"] != user_id:
            return Outcome.success(None)
        return Outcome.success(self._with_tags(row))

    async def list(self, *, user_id, archived=None, note_ids=None):
        if err := self.store.record("notes.list"):
            return Outcome.failure(err)
        rows = [r for r in self.store.notes.values() if r["user_id"] == user_id]
        if archived is not None:
            rows = [r for r in rows if r["is_archived"] == archived]
        if note_ids is not None:
            rows = [r for r in rows if r["id"] in set(note_ids)]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return Outcome.success([self._with_tags(r) for r in rows])

    async def search(self, *, user_id, query):
        if err := self.store.record("notes.search"):
            return Outcome.failure(err)
        needle = query.lower()
        rows = [
            r for r in self.store.notes.values()
            if r["user_id"] == user_id and (needle in r["title"].lower() or needle in r["content"].lower())
        ]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return Outcome.success([self._with_tags(r) for r in rows])

    async def update_fields(self, note_id, *, user_id, changes):
        if err := self.store.record("notes.update"):
            return Outcome.failure(err)
        row = self.store.notes.get(note_id)
        if row is None or row["user_id"] != user_id:
            return Outcome.success(None)
        row.update({k: v for k, v in changes.items() if k not in {"id", "user_id", "created_at"}})
        return Outcome.success(Note.model_validate(row))

    async def delete(self, note_id, *, user_id):
        if err := self.store.record("notes.delete"):
            return Outcome.failure(err)
        row = self.store.notes.get(note_id)
        if row is None or row["user_id"] != user_id:
            return Outcome.success(False)
        del self.store.notes[note_id]
        self.store.links = [(n, t) for n, t in self.store.links if n != note_id]
        return Outcome.success(True)

    def _with_tags(self, row: dict) -> Note:
        tags = [Tag.model_validate(self.store.tags[t]) for n, t in self.store.links if n == row["id"]]
        return Note.model_validate({**row, "tags": sorted(tags, key=lambda t: t.name)})


class FakeTagRepository(TagRepository):
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def create(self, *, user_id, name):
        if err := self.store.record("tags.create"):
            return Outcome.failure(err)
        if self.store.tag_rows_named(user_id, name):
            return Outcome.failure(RemoteError("duplicate key value violates unique constraint", code="23505"))
        return Outcome.success(Tag.model_validate(self._insert(user_id, name)))

    async def get(self, tag_id, *, user_id):
        if err := self.store.record("tags.get"):
            return Outcome.failure(err)
        row = self.store.tags.get(tag_id)
        if row is None or row["user_id"] != user_id:
            return Outcome.success(None)
        return Outcome.success(Tag.model_validate(row))

    async def find_by_name(self, name, *, user_id):
        if err := self.store.record("tags.find_by_name"):
            return Outcome.failure(err)
        rows = self.store.tag_rows_named(user_id, name)
        return Outcome.success(Tag.model_validate(rows[0]) if rows else None)

    async def list(self, *, user_id):
        if err := self.store.record("tags.list"):
            return Outcome.failure(err)
        rows = sorted((t for t in self.store.tags.values() if t["user_id"] == user_id), key=lambda t: t["name"])
        return Outcome.success([Tag.model_validate(r) for r in rows])

    async def upsert_many(self, names, *, user_id):
        if err := self.store.record("tags.upsert_many"):
            return Outcome.failure(err)
        if len(set(names)) != len(names):
            return Outcome.failure(
                RemoteError("ON CONFLICT DO UPDATE command cannot affect row a second time", code="21000")
            )
        result = []
        for name in names:
            rows = self.store.tag_rows_named(user_id, name)
            result.append(Tag.model_validate(rows[0] if rows else self._insert(user_id, name)))
        return Outcome.success(result)

    async def link(self, note_id, tag_ids):
        if err := self.store.record("note_tags.insert"):
            return Outcome.failure(err)
        new_links = [(note_id, t) for t in tag_ids]
        if any(link in self.store.links for link in new_links) or len(set(new_links)) != len(new_links):
            return Outcome.failure(RemoteError("duplicate key value violates pkey", code="23505"))
        self.store.links.extend(new_links)
        return Outcome.success(None)

    async def unlink_all(self, note_id):
        if err := self.store.record("note_tags.delete"):
            return Outcome.failure(err)
        self.store.links = [(n, t) for n, t in self.store.links if n != note_id]
        return Outcome.success(None)

    async def note_ids_for_tag(self, tag_id):
        if err := self.store.record("note_tags.select"):
            return Outcome.failure(err)
        return Outcome.success([n for n, t in self.store.links if t == tag_id])

    async def reassign_links(self, tag_id, new_tag_id):
        if err := self.store.record("note_tags.reassign"):
            return Outcome.failure(err)
        moved = [n for n, t in self.store.links if t == tag_id]
        kept = [(n, t) for n, t in self.store.links if t != tag_id]
        for note_id in moved:
            if (note_id, new_tag_id) not in kept:
                kept.append((note_id, new_tag_id))
        self.store.links = kept
        return Outcome.success(len(moved))

    async def delete(self, tag_id, *, user_id):
        if err := self.store.record("tags.delete"):
            return Outcome.failure(err)
        row = self.store.tags.get(tag_id)
        if row is None or row["user_id"] != user_id:
            return Outcome.success(False)
        del self.store.tags[tag_id]
        self.store.links = [(n, t) for n, t in self.store.links if t != tag_id]
        return Outcome.success(True)

    def _insert(self, user_id: UUID, name: str) -> dict:
        tag_id = uuid4()
        self.store.tags[tag_id] = {"id": tag_id, "name": name, "user_id": user_id, "created_at": self.store.now()}
        return self.store.tags[tag_id]
