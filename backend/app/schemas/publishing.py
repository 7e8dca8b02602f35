"""Scheduled-publish sweep responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PublishedArticle(BaseModel):
    """An article the sweep just published."""

    id: UUID
    title: str
    published_at: datetime | None = None


class PublishScheduledResponse(BaseModel):
    """Result of one sweep pass."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    published_count: int = Field(..., alias="publishedCount")
    published_articles: list[PublishedArticle] = Field(
        default_factory=list, alias="publishedArticles"
    )
