from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from notes_api.core.models.tag import Tag
from notes_api.db.outcome import Outcome, RemoteError, run_remote

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import Client


class SupabaseRepository:
    """Shared plumbing for repositories backed by a request-scoped Supabase client."""

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Outcome[Any]:
        return await run_remote(func)

    @staticmethod
    def _rows(resp: Any) -> list[dict[str, Any]]:
        data = getattr(resp, "data", None)
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    @classmethod
    def _inserted(cls, outcome: Outcome[Any]) -> Outcome[dict[str, Any]]:
        """Narrow an insert response to its row; an empty representation is a failure."""
        if not outcome.ok:
            return Outcome.failure(outcome.error)
        rows = cls._rows(outcome.value)
        if not rows:
            return Outcome.failure(RemoteError(message="No row returned by insert"))
        return Outcome.success(rows[0])

    @staticmethod
    def _row_to_tag(row: dict[str, Any]) -> Tag:
        return Tag.model_validate({k: row[k] for k in Tag.model_fields if k in row})

    @staticmethod
    def _to_json(values: dict[str, Any]) -> dict[str, Any]:
        # PostgREST expects JSON-serializable payloads
        return {k: (v.isoformat() if isinstance(v, datetime) else v) for k, v in values.items()}
