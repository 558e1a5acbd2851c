from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


class AppBaseModel(PydanticBaseModel):
    """Base model for all domain models."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
    )


class TimestampedModel(AppBaseModel):
    """Base model with the timestamp columns maintained by the database."""

    created_at: datetime | None = None
    updated_at: datetime | None = None
