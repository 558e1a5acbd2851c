from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field

from .base import TimestampedModel
from .tag import Tag


class Note(TimestampedModel):
    """Note domain model with its linked tags."""

    id: UUID = Field(description="Unique note identifier")
    title: str = Field(..., min_length=1, description="Note title")
    content: str = Field(default="", description="Note content")
    user_id: UUID = Field(description="Owner of the note")
    is_archived: bool = Field(default=False, description="Whether note is archived")

    # Resolved from note_tags; never written to the notes table
    tags: list[Tag] = Field(default_factory=list, description="Tags linked through note_tags")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "title": "Sprint planning",
                    "content": "Review the backlog before Monday.",
                    "user_id": str(uuid4()),
                    "is_archived": False,
                    "tags": [],
                }
            ]
        }
    }
