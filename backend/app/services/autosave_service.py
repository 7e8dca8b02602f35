"""Draft autosave for the article editor."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.clock import utcnow
from app.config import get_settings
from app.exceptions import ArticleValidationError
from app.models import Article, ArticleStatus
from app.schemas.article import ArticleDraft
from app.services.article_service import apply_lifecycle
from app.services.category_service import CategoryService
from app.services.periodic import PeriodicTask
from app.services.slug_service import slugify, unique_slug

logger = logging.getLogger(__name__)


@dataclass
class AutosaveResult:
    """saved is False with a reason when nothing was written."""

    saved: bool
    saved_at: datetime | None = None
    reason: str | None = None


async def autosave_draft(
    session: AsyncSession,
    article_id: UUID | None,
    draft: ArticleDraft,
    now: datetime | None = None,
) -> AutosaveResult:
    """
    Write the editor's current state over the existing article record.

    Autosave never creates articles: without an article id (a new article
    that has not been saved yet) it does nothing. Blank title and content
    also do nothing. Failures are logged and reported in the result rather
    than raised, so a background save never interrupts editing.
    """
    if draft.is_empty:
        return AutosaveResult(saved=False, reason="empty")
    if article_id is None:
        return AutosaveResult(saved=False, reason="no_target")

    now = now or utcnow()
    try:
        article = await session.get(Article, article_id)
        if article is None:
            logger.warning("Autosave target %s no longer exists", article_id)
            return AutosaveResult(saved=False, reason="not_found")

        category_id = article.category_id
        if draft.category and draft.category.strip():
            category = await CategoryService(session).get_by_name(draft.category.strip())
            if category is not None:
                category_id = category.id

        if draft.slug and draft.slug.strip():
            slug = await unique_slug(session, draft.slug.strip(), exclude_id=article.id)
        elif draft.title.strip():
            slug = await unique_slug(session, slugify(draft.title), exclude_id=article.id)
        else:
            slug = article.slug

        status = ArticleStatus(draft.status)
        published_at = draft.published_at or article.published_at
        published_at = apply_lifecycle(
            status,
            published_at,
            now,
            check_schedule=(
                status.value != article.status or published_at != article.published_at
            ),
        )

        article.title = draft.title.strip()
        article.content = draft.content
        article.category_id = category_id
        article.author = draft.author or article.author
        article.slug = slug
        article.status = status.value
        article.seo_title = draft.seo_title or draft.title.strip()
        article.seo_description = draft.seo_description or ""
        article.tags = draft.tags
        article.published_at = published_at
        article.updated_at = now
        await session.commit()
    except ArticleValidationError as e:
        logger.warning("Autosave of %s skipped: %s", article_id, e)
        return AutosaveResult(saved=False, reason=str(e))
    except SQLAlchemyError:
        logger.exception("Autosave of %s failed", article_id)
        await session.rollback()
        return AutosaveResult(saved=False, reason="error")

    logger.debug("Autosaved %s at %s", article_id, now.isoformat())
    return AutosaveResult(saved=True, saved_at=now)


class DraftAutosaver(PeriodicTask):
    """
    Periodically autosave an open editor.

    get_draft returns the editor's current state. article_id may be set
    after construction, once the first explicit save has created the record.
    """

    name = "draft-autosaver"

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        get_draft: Callable[[], ArticleDraft],
        article_id: UUID | None = None,
        interval_seconds: float | None = None,
    ):
        if interval_seconds is None:
            interval_seconds = get_settings().autosave_interval_seconds
        super().__init__(interval_seconds)
        self.session_factory = session_factory
        self.get_draft = get_draft
        self.article_id = article_id
        self.last_result: AutosaveResult | None = None
        self.last_saved_at: datetime | None = None

    async def tick(self) -> None:
        draft = self.get_draft()
        if draft.is_empty or self.article_id is None:
            return

        async with self.session_factory() as session:
            self.last_result = await autosave_draft(session, self.article_id, draft)
        if self.last_result.saved:
            self.last_saved_at = self.last_result.saved_at
