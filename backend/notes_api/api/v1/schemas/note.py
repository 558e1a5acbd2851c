from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator, model_validator

from notes_api.api.v1.schemas.tag import TagRead  # noqa: TCH001
from notes_api.core.models.base import AppBaseModel
from notes_api.core.models.tag import TAG_NAME_MAX_LENGTH, normalize_tag_names


def _validate_tag_names(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    normalized = normalize_tag_names(v)
    too_long = [name for name in normalized if len(name) > TAG_NAME_MAX_LENGTH]
    if too_long:
        raise ValueError(f"Tag names must be at most {TAG_NAME_MAX_LENGTH} characters")
    return normalized


class NoteCreate(AppBaseModel):
    title: str = Field(..., max_length=255, description="Note title")
    content: str = Field(..., max_length=10000, description="Note content")
    tags: list[str] = Field(default_factory=list, description="Tag names to link, created when missing")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _validate_tag_names(v) or []

    @model_validator(mode="after")
    def validate_title_and_content(self) -> NoteCreate:
        if not self.title.strip() or not self.content.strip():
            raise ValueError("Title and content are required to create a note.")
        self.title = self.title.strip()
        return self


class NoteUpdate(AppBaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = Field(default=None, max_length=10000)
    tags: list[str] | None = Field(
        default=None,
        description="Replaces every linked tag when present; an empty list removes them all",
    )

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _validate_tag_names(v)

    @model_validator(mode="after")
    def validate_changes(self) -> NoteUpdate:
        if self.title is not None:
            if not self.title.strip():
                raise ValueError("Title cannot be empty")
            self.title = self.title.strip()
        if self.title is None and self.content is None and self.tags is None:
            raise ValueError("At least title, content or tags must be provided for updating.")
        return self


class NoteRead(AppBaseModel):
    id: UUID
    title: str
    content: str
    user_id: UUID
    is_archived: bool
    created_at: datetime | None
    updated_at: datetime | None
    tags: list[TagRead]


class NoteResponse(AppBaseModel):
    message: str
    note: NoteRead


class NoteListResponse(AppBaseModel):
    message: str
    notes: list[NoteRead]
