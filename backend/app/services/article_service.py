"""Article authoring: create, edit, publish, schedule and delete."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.clock import utcnow
from app.config import Settings, get_settings
from app.exceptions import ArticleValidationError, DuplicateSlugError, UnknownCategoryError
from app.models import Article, ArticleStatus, Category
from app.schemas.article import ArticleCreate, ArticleResponse, ArticleUpdate
from app.services.category_service import CategoryService, is_all_categories
from app.services.feed_service import category_badge
from app.services.slug_service import slug_exists, slugify, unique_slug

logger = logging.getLogger(__name__)


def apply_lifecycle(
    status: ArticleStatus | str,
    published_at: datetime | None,
    now: datetime,
    *,
    check_schedule: bool = True,
) -> datetime | None:
    """
    Return the published_at to store for status, enforcing the lifecycle rules.

    Published articles get now when they have no publish time and may not
    carry a future one. Scheduled articles need a publish time after now;
    check_schedule=False skips that comparison for edits that leave an
    existing schedule untouched.
    """
    status = ArticleStatus(status)
    if status is ArticleStatus.PUBLISHED:
        if published_at is None:
            return now
        if published_at > now:
            raise ArticleValidationError(
                "A published article cannot have a future publish time; schedule it instead"
            )
    elif status is ArticleStatus.SCHEDULED:
        if published_at is None:
            raise ArticleValidationError("A scheduled article needs a publish time")
        if check_schedule and published_at <= now:
            raise ArticleValidationError("The scheduled publish time must be in the future")
    return published_at


class ArticleService:
    """Service for authoring articles from the admin dashboard."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.categories = CategoryService(session)

    async def get(self, article_id: UUID) -> Article | None:
        return await self.session.get(Article, article_id)

    async def to_response(self, article: Article) -> ArticleResponse:
        category = await self.categories.get(article.category_id) if article.category_id else None
        response = ArticleResponse.model_validate(article)
        response.category = category_badge(category) if category else None
        return response

    async def list_articles(
        self,
        status: ArticleStatus | None = None,
        search: str | None = None,
        category: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[tuple[Article, Category | None]], int]:
        """All articles, newest first, with the admin table's filters."""
        conditions = []
        if status:
            conditions.append(Article.status == status.value)
        if search and search.strip():
            conditions.append(func.lower(Article.title).contains(search.strip().lower(), autoescape=True))
        if not is_all_categories(category):
            conditions.append(Article.category_id == await self.categories.resolve_id(category))

        query = (
            select(Article, Category)
            .outerjoin(Category, Article.category_id == Category.id)
            .where(*conditions)
            .order_by(Article.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        rows = [(article, cat) for article, cat in (await self.session.execute(query)).all()]
        total = (
            await self.session.execute(select(func.count(Article.id)).where(*conditions))
        ).scalar() or 0
        return rows, total

    async def _category_id(self, name: str | None, category_id: UUID | None) -> UUID | None:
        if category_id is not None:
            if await self.categories.get(category_id) is None:
                raise UnknownCategoryError(str(category_id))
            return category_id
        if name and name.strip():
            return await self.categories.resolve_id(name)
        return None

    async def _slug_for(self, explicit: str | None, title: str, exclude_id: UUID | None = None) -> str:
        """Use an explicit slug as given (it must be free) or derive one from the title."""
        if explicit and explicit.strip():
            slug = explicit.strip()
            if await slug_exists(self.session, slug, exclude_id=exclude_id):
                raise DuplicateSlugError(slug)
            return slug
        return await unique_slug(self.session, slugify(title), exclude_id=exclude_id)

    async def _commit_slug(self, slug: str) -> None:
        """Commit, reporting a unique-slug race lost to a concurrent save as a duplicate."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await slug_exists(self.session, slug):
                raise DuplicateSlugError(slug) from e
            raise

    async def create(self, data: ArticleCreate, now: datetime | None = None) -> Article:
        """Create an article. Title and category are required; publishing also needs content."""
        now = now or utcnow()
        title = data.title.strip()
        content = data.content.strip()
        if not title:
            raise ArticleValidationError("Title is required")
        if data.status is ArticleStatus.PUBLISHED and not content:
            raise ArticleValidationError("Content is required to publish")

        category_id = await self._category_id(data.category, data.category_id)
        if category_id is None:
            raise ArticleValidationError("Category is required")

        article = Article(
            title=title,
            content=content,
            category_id=category_id,
            author=data.author or self.settings.default_author,
            slug=await self._slug_for(data.slug, title),
            status=data.status.value,
            thumbnail=data.thumbnail,
            thumbnail_alt=data.thumbnail_alt,
            seo_title=data.seo_title or title,
            seo_description=data.seo_description or "",
            tags=data.tags,
            published_at=apply_lifecycle(data.status, data.published_at, now),
            created_at=now,
            updated_at=now,
        )
        self.session.add(article)
        await self._commit_slug(article.slug)
        await self.session.refresh(article)
        logger.info("Created %s article %s (%s)", article.status, article.slug, article.id)
        return article

    async def update(
        self, article_id: UUID, data: ArticleUpdate, now: datetime | None = None
    ) -> Article | None:
        """Apply a partial update from the editor."""
        article = await self.get(article_id)
        if not article:
            return None

        now = now or utcnow()
        changes = data.model_dump(exclude_unset=True)

        title = (changes.get("title") or article.title).strip()
        content = changes["content"].strip() if changes.get("content") is not None else article.content
        status = ArticleStatus(changes.get("status") or article.status)
        if status is ArticleStatus.PUBLISHED and not content:
            raise ArticleValidationError("Content is required to publish")

        if "category" in changes or "category_id" in changes:
            category_id = await self._category_id(changes.get("category"), changes.get("category_id"))
            article.category_id = category_id or article.category_id

        if changes.get("slug") and changes["slug"].strip() != article.slug:
            article.slug = await self._slug_for(changes["slug"], title, exclude_id=article.id)

        published_at = changes.get("published_at", article.published_at)
        schedule_changed = (
            status.value != article.status or published_at != article.published_at
        )
        article.published_at = apply_lifecycle(
            status, published_at, now, check_schedule=schedule_changed
        )
        article.status = status.value
        article.title = title
        article.content = content

        for key in ("author", "thumbnail", "thumbnail_alt", "seo_title", "seo_description", "tags"):
            if key in changes:
                setattr(article, key, changes[key])
        if not article.seo_title:
            article.seo_title = title

        article.updated_at = now
        await self._commit_slug(article.slug)
        await self.session.refresh(article)
        return article

    async def publish(self, article_id: UUID, now: datetime | None = None) -> Article | None:
        """Publish immediately, also ahead of a pending schedule."""
        article = await self.get(article_id)
        if not article:
            return None

        now = now or utcnow()
        if not article.content.strip():
            raise ArticleValidationError("Content is required to publish")
        if article.published_at is None or article.published_at > now:
            article.published_at = now
        article.status = ArticleStatus.PUBLISHED.value
        article.updated_at = now
        await self.session.commit()
        await self.session.refresh(article)
        return article

    async def schedule(
        self, article_id: UUID, published_at: datetime, now: datetime | None = None
    ) -> Article | None:
        """Queue an article for publication at a future time."""
        article = await self.get(article_id)
        if not article:
            return None

        now = now or utcnow()
        article.published_at = apply_lifecycle(ArticleStatus.SCHEDULED, published_at, now)
        article.status = ArticleStatus.SCHEDULED.value
        article.updated_at = now
        await self.session.commit()
        await self.session.refresh(article)
        logger.info("Scheduled %s for %s", article.slug, article.published_at.isoformat())
        return article

    async def delete(self, article_id: UUID) -> bool:
        article = await self.get(article_id)
        if not article:
            return False

        await self.session.delete(article)
        await self.session.commit()
        logger.info("Deleted article %s", article_id)
        return True
