"""Public reader queries: the paginated feed and single-article lookups."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.clock import format_display_date
from app.config import Settings, get_settings
from app.constants.defaults import (
    ALL_CATEGORIES,
    PLACEHOLDER_THUMBNAIL,
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_NAME,
)
from app.models import Article, ArticleStatus, Category
from app.schemas.article import ArticleDetail, ArticleSummary, CategoryBadge
from app.services.category_service import CategoryService, is_all_categories

logger = logging.getLogger(__name__)

PUBLISHED = ArticleStatus.PUBLISHED.value


def resolve_thumbnail_url(thumbnail: str | None, settings: Settings) -> str:
    """Map a stored thumbnail reference to a URL the browser can load."""
    if not thumbnail:
        return PLACEHOLDER_THUMBNAIL
    if thumbnail.startswith(("http://", "https://")):
        return thumbnail
    if thumbnail.startswith("/"):
        return f"{settings.site_base_url.rstrip('/')}{thumbnail}"
    base = settings.storage_public_url.rstrip("/")
    return f"{base}/{settings.media_bucket}/{thumbnail}"


def category_badge(category: Category | None) -> CategoryBadge:
    if category is None:
        return CategoryBadge(name=UNCATEGORIZED_NAME, color=UNCATEGORIZED_COLOR)
    return CategoryBadge(name=category.name, color=category.color)


def to_summary(article: Article, category: Category | None, settings: Settings) -> ArticleSummary:
    return ArticleSummary(
        id=article.public_id,
        title=article.title,
        category=category_badge(category),
        thumbnail=resolve_thumbnail_url(article.thumbnail, settings),
        date=format_display_date(article.published_at, settings.display_utc_offset_hours),
        published_at=article.published_at,
        views=article.views,
    )


def merge_feed_pages(
    accumulated: list[ArticleSummary], incoming: Iterable[ArticleSummary]
) -> list[ArticleSummary]:
    """Append the incoming cards whose id is not already loaded."""
    seen = {item.id for item in accumulated}
    merged = list(accumulated)
    for item in incoming:
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)
    return merged


@dataclass
class FeedPage:
    """A page of feed cards."""

    articles: list[ArticleSummary]
    has_more: bool
    page: int
    category: str
    total: int = 0


class FeedService:
    """Service for the public article feed."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()

    def _published(self):
        return (
            select(Article, Category)
            .outerjoin(Category, Article.category_id == Category.id)
            .where(Article.status == PUBLISHED)
        )

    def _summaries(self, rows) -> list[ArticleSummary]:
        return [to_summary(article, category, self.settings) for article, category in rows]

    async def get_feed_page(
        self, page: int = 1, limit: int | None = None, category: str = ALL_CATEGORIES
    ) -> FeedPage:
        """
        Fetch one page of published articles, newest first.

        has_more is true when the page came back full, so an exactly-full last
        page reports one more (empty) page. Unknown category names raise
        UnknownCategoryError; database failures give an empty final page.
        """
        if limit is None:
            limit = self.settings.feed_default_limit
        if page < 1 or not 1 <= limit <= self.settings.feed_max_limit:
            raise ValueError(f"Invalid feed parameters: page={page}, limit={limit}")

        try:
            query = self._published()
            count_query = select(func.count(Article.id)).where(Article.status == PUBLISHED)

            if not is_all_categories(category):
                category_id = await CategoryService(self.session).resolve_id(category)
                query = query.where(Article.category_id == category_id)
                count_query = count_query.where(Article.category_id == category_id)

            query = (
                query.order_by(Article.published_at.desc(), Article.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            result = await self.session.execute(query)
            articles = self._summaries(result.all())
            total = (await self.session.execute(count_query)).scalar() or 0
        except SQLAlchemyError:
            logger.exception("Feed query failed (page=%s, category=%s)", page, category)
            return FeedPage(articles=[], has_more=False, page=page, category=category)

        return FeedPage(
            articles=articles,
            has_more=len(articles) == limit,
            page=page,
            category=category,
            total=total,
        )

    async def get_article(self, id_or_slug: str) -> ArticleDetail | None:
        """Published article by UUID or slug. On duplicate slugs the newest wins."""
        query = self._published()
        try:
            query = query.where(Article.id == UUID(id_or_slug))
        except ValueError:
            query = query.where(Article.slug == id_or_slug)

        query = query.order_by(Article.published_at.desc()).limit(1)
        row = (await self.session.execute(query)).first()
        if row is None:
            return None

        article, category = row
        summary = to_summary(article, category, self.settings)
        return ArticleDetail(
            **summary.model_dump(),
            content=article.content,
            author=article.author,
            slug=article.slug,
            short_code=article.short_code,
            category_id=article.category_id,
            article_id=article.id,
        )

    async def popular(self, limit: int = 5) -> list[ArticleSummary]:
        """Most viewed published articles."""
        query = self._published().order_by(Article.views.desc(), Article.published_at.desc())
        result = await self.session.execute(query.limit(limit))
        return self._summaries(result.all())

    async def related(
        self, article_id: UUID, category_id: UUID, limit: int = 5
    ) -> list[ArticleSummary]:
        """Newest published articles of the same category, excluding the current one."""
        query = (
            self._published()
            .where(Article.category_id == category_id, Article.id != article_id)
            .order_by(Article.published_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return self._summaries(result.all())

    async def search(self, text: str, limit: int = 5) -> list[ArticleSummary]:
        """Case-insensitive title search over published articles."""
        text = text.strip()
        if not text:
            return []

        query = (
            self._published()
            .where(func.lower(Article.title).contains(text.lower(), autoescape=True))
            .order_by(Article.published_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return self._summaries(result.all())

    async def record_view(self, article_id: str) -> bool:
        """Increment the view counter of a published article in one statement."""
        try:
            uuid = UUID(article_id)
        except ValueError:
            logger.warning("View count for invalid article id %r", article_id)
            return False

        try:
            result = await self.session.execute(
                update(Article)
                .where(Article.id == uuid, Article.status == PUBLISHED)
                .values(views=Article.views + 1)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to update view count for %s", article_id)
            await self.session.rollback()
            return False
        return result.rowcount > 0


FetchPage = Callable[[int, int, str], Awaitable[FeedPage]]


@dataclass
class FeedPager:
    """
    Infinite-scroll state: the cards loaded so far and whether to ask for more.

    Each load merges the next page into the accumulated list, dropping cards
    already shown, which guards against pages shifting under concurrent
    publishes.
    """

    fetch_page: FetchPage
    limit: int = 5
    category: str = ALL_CATEGORIES
    items: list[ArticleSummary] = field(default_factory=list)
    page: int = 0
    has_more: bool = True

    async def load_next(self) -> list[ArticleSummary]:
        """Load the next page and return only the newly added cards."""
        if not self.has_more:
            return []

        result = await self.fetch_page(self.page + 1, self.limit, self.category)
        before = len(self.items)
        self.items = merge_feed_pages(self.items, result.articles)
        self.page += 1
        self.has_more = result.has_more
        return self.items[before:]

    def reset(self, category: str | None = None) -> None:
        """Start over, optionally switching category."""
        if category is not None:
            self.category = category
        self.items = []
        self.page = 0
        self.has_more = True
