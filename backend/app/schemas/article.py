"""Article schemas for API request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.clock import to_aware_utc
from app.models import ArticleStatus


def _split_tags(value: object) -> object:
    """Accept the editor's comma-separated tag string as well as a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, list):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return value


class CategoryBadge(BaseModel):
    """Category name and color shown next to an article."""

    name: str
    color: str


class ArticleSummary(BaseModel):
    """Feed card: what the reader sees before opening an article."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Slug, or the UUID when the article has no slug")
    title: str
    category: CategoryBadge
    thumbnail: str
    date: str = Field(..., description="Publish date formatted YYYY.MM.DD")
    published_at: datetime | None = Field(default=None, alias="publishedAt")
    views: int = 0


class ArticleDetail(ArticleSummary):
    """Full public article."""

    content: str
    author: str
    slug: str
    short_code: str | None = None
    category_id: UUID | None = None
    article_id: UUID


class ArticleListResponse(BaseModel):
    """Plain list of article cards."""

    articles: list[ArticleSummary]


class SearchResponse(ArticleListResponse):
    """Search results and the query that produced them."""

    query: str


class FeedPageResponse(BaseModel):
    """One page of the public feed."""

    model_config = ConfigDict(populate_by_name=True)

    articles: list[ArticleSummary]
    has_more: bool = Field(..., alias="hasMore")
    page: int
    category: str
    total: int = Field(default=0, description="Exact count of matching published articles")


class _ArticleFields(BaseModel):
    """Validators shared by the authoring payloads."""

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def split_tags(cls, value: object) -> object:
        return _split_tags(value)

    @field_validator("published_at", mode="after", check_fields=False)
    @classmethod
    def normalize_published_at(cls, value: datetime | None) -> datetime | None:
        return to_aware_utc(value)


class ArticleCreate(_ArticleFields):
    """Schema for creating an article from the editor."""

    title: str = Field(..., min_length=1, max_length=500)
    content: str = ""
    category: str | None = Field(default=None, description="Category name")
    category_id: UUID | None = None
    author: str | None = Field(default=None, max_length=100)
    slug: str | None = Field(default=None, max_length=255)
    status: ArticleStatus = ArticleStatus.DRAFT
    thumbnail: str | None = Field(default=None, max_length=2048)
    thumbnail_alt: str | None = Field(default=None, max_length=300)
    seo_title: str | None = Field(default=None, max_length=500)
    seo_description: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list)
    published_at: datetime | None = None


class ArticleUpdate(_ArticleFields):
    """Partial update; only the provided keys are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = None
    category: str | None = None
    category_id: UUID | None = None
    author: str | None = Field(default=None, max_length=100)
    slug: str | None = Field(default=None, max_length=255)
    status: ArticleStatus | None = None
    thumbnail: str | None = Field(default=None, max_length=2048)
    thumbnail_alt: str | None = Field(default=None, max_length=300)
    seo_title: str | None = Field(default=None, max_length=500)
    seo_description: str | None = Field(default=None, max_length=1000)
    tags: list[str] | None = None
    published_at: datetime | None = None


class ArticleDraft(_ArticleFields):
    """In-progress editor state sent by autosave. Everything may be blank."""

    title: str = Field(default="", max_length=500)
    content: str = ""
    category: str | None = None
    author: str | None = Field(default=None, max_length=100)
    slug: str | None = Field(default=None, max_length=255)
    status: ArticleStatus = ArticleStatus.DRAFT
    seo_title: str | None = Field(default=None, max_length=500)
    seo_description: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list)
    published_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.title.strip() and not self.content.strip()


class ScheduleRequest(_ArticleFields):
    """Schedule an article for automatic publication."""

    published_at: datetime


class ArticleResponse(BaseModel):
    """Admin view of an article with every stored field."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    short_code: str | None = None
    title: str
    content: str
    category_id: UUID | None = None
    category: CategoryBadge | None = None
    author: str
    status: ArticleStatus
    thumbnail: str | None = None
    thumbnail_alt: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    tags: list[str] = Field(default_factory=list)
    views: int = 0
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None


class AdminArticleListResponse(BaseModel):
    """Admin article table."""

    articles: list[ArticleResponse]
    total: int


class AutosaveResponse(BaseModel):
    """Outcome of one autosave."""

    saved: bool
    saved_at: datetime | None = None
    reason: str | None = None


class ViewCountResponse(BaseModel):
    """View counting never fails loudly."""

    success: bool
    silent: bool = False
    message: str | None = None
