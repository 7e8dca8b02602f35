"""Media schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MediaResponse(BaseModel):
    """Uploaded image with the titles of the articles that use it."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    key: str
    url: str
    content_type: str
    size: int
    uploaded_by: str
    uploaded_at: datetime
    used_in: list[str] = Field(default_factory=list)


class MediaListResponse(BaseModel):
    media: list[MediaResponse]
    total: int
