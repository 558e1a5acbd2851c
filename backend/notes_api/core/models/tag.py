from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from pydantic import Field

from .base import AppBaseModel

if TYPE_CHECKING:
    from collections.abc import Iterable

TAG_NAME_MAX_LENGTH = 50


def normalize_tag_names(names: Iterable[str] | None) -> list[str]:
    """Trim names, drop blanks and duplicates, keep first-seen order.

    Names stay case-sensitive: uniqueness in the ``tags`` table is on the exact
    ``(user_id, name)`` pair. A batched upsert must not contain the same key
    twice, so callers always go through this before hitting the database.
    """
    normalized: list[str] = []
    for name in names or []:
        stripped = name.strip() if isinstance(name, str) else ""
        if stripped and stripped not in normalized:
            normalized.append(stripped)
    return normalized


class Tag(AppBaseModel):
    """Tag domain model. ``(user_id, name)`` is unique."""

    id: UUID
    name: str = Field(..., min_length=1, max_length=TAG_NAME_MAX_LENGTH)
    user_id: UUID
    created_at: datetime | None = None
