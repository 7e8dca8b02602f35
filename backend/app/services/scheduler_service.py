"""Scheduled publishing: promote due scheduled articles to published."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from app.clock import utcnow
from app.models import Article, ArticleStatus
from app.schemas.publishing import PublishedArticle
from app.services.periodic import PeriodicTask

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Articles published by one sweep pass."""

    count: int = 0
    articles: list[PublishedArticle] = field(default_factory=list)


async def publish_due_articles(session: AsyncSession, now: datetime | None = None) -> SweepResult:
    """
    Publish every scheduled article whose published_at is not after now.

    A single UPDATE ... RETURNING both transitions and reports the articles,
    so an article a concurrent sweep already published is neither counted nor
    listed here. Running it twice on the same data publishes nothing the
    second time.
    """
    now = now or utcnow()
    result = await session.execute(
        update(Article)
        .where(
            Article.status == ArticleStatus.SCHEDULED.value,
            col(Article.published_at).is_not(None),
            col(Article.published_at) <= now,
        )
        .values(status=ArticleStatus.PUBLISHED.value, updated_at=now)
        .returning(Article.id, Article.title, Article.published_at)
        .execution_options(synchronize_session=False)
    )
    published = result.all()
    await session.commit()

    if not published:
        logger.debug("No scheduled articles due at %s", now.isoformat())
        return SweepResult()

    for row in published:
        logger.info("Published %s (scheduled for %s)", row.title, row.published_at)
    logger.info("Published %d scheduled article(s)", len(published))

    return SweepResult(
        count=len(published),
        articles=[
            PublishedArticle(id=row.id, title=row.title, published_at=row.published_at)
            for row in published
        ],
    )


class ScheduledPublisher(PeriodicTask):
    """Server-side sweep that runs for as long as the application is up."""

    name = "scheduled-publisher"

    def __init__(self, session_factory: Callable[[], AsyncSession], interval_seconds: float = 60.0):
        super().__init__(interval_seconds)
        self.session_factory = session_factory
        self.last_result: SweepResult | None = None
        self.total_published = 0

    async def tick(self) -> None:
        async with self.session_factory() as session:
            self.last_result = await publish_due_articles(session)
        self.total_published += self.last_result.count
