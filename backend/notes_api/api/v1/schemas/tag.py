from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from notes_api.core.models.base import AppBaseModel
from notes_api.core.models.tag import TAG_NAME_MAX_LENGTH


class TagCreate(AppBaseModel):
    name: str = Field(..., description="Tag name, unique per user")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Tag name is required")
        if len(name) > TAG_NAME_MAX_LENGTH:
            raise ValueError(f"Tag name must be at most {TAG_NAME_MAX_LENGTH} characters")
        return name


class TagRead(AppBaseModel):
    id: UUID
    name: str
    user_id: UUID
    created_at: datetime | None = None


class TagResponse(AppBaseModel):
    message: str
    tag: TagRead


class TagDeleteResponse(AppBaseModel):
    message: str
    tag_id: UUID
    replacement_tag_id: UUID | None
    reassigned_notes: int
    reassignment_error: str | None = None
