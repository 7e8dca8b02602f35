"""Article model and its publication lifecycle."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Text
from sqlmodel import Field, SQLModel

from app.clock import utcnow
from app.db.types import UTCTimestamp


class ArticleStatus(str, Enum):
    """Publication states of an article."""

    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class Article(SQLModel, table=True):
    """
    Authored article.

    Published articles always carry a published_at in the past; scheduled
    ones carry the future time at which the sweep will publish them.
    """

    __tablename__ = "articles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(max_length=255, unique=True, index=True)
    short_code: str | None = Field(default=None, max_length=6, unique=True, index=True)

    # Content
    title: str = Field(max_length=500)
    content: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    category_id: UUID | None = Field(default=None, foreign_key="categories.id", index=True)
    author: str = Field(max_length=100)

    # Thumbnail
    thumbnail: str | None = Field(default=None, max_length=2048)
    thumbnail_alt: str | None = Field(default=None, max_length=300)

    # SEO
    seo_title: str | None = Field(default=None, max_length=500)
    seo_description: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))

    # Lifecycle
    status: str = Field(default=ArticleStatus.DRAFT.value, max_length=20, index=True)
    views: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)
    published_at: datetime | None = Field(default=None, index=True, sa_type=UTCTimestamp)

    @property
    def public_id(self) -> str:
        """Identifier used in public links: the slug when present."""
        return self.slug or str(self.id)
