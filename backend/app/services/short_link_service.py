"""Short links: six-character codes that resolve to published articles."""

import logging
import secrets
import string
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.exceptions import ShortLinkError
from app.models import Article, ArticleStatus

logger = logging.getLogger(__name__)

SHORT_CODE_ALPHABET = string.ascii_letters + string.digits
SHORT_CODE_LENGTH = 6
MAX_ATTEMPTS = 10


def generate_short_code() -> str:
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def is_short_code(code: str) -> bool:
    return len(code) == SHORT_CODE_LENGTH and all(c in SHORT_CODE_ALPHABET for c in code)


class ShortLinkService:
    """Assigns and resolves article short codes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _code_taken(self, code: str) -> bool:
        result = await self.session.execute(select(Article.id).where(Article.short_code == code))
        return result.first() is not None

    async def _free_code(self) -> str:
        for _ in range(MAX_ATTEMPTS):
            code = generate_short_code()
            if not await self._code_taken(code):
                return code
        raise ShortLinkError(f"No free short code after {MAX_ATTEMPTS} attempts")

    async def shorten(self, article_id: UUID) -> Article | None:
        """
        Give a published article a short code, keeping the one it already has.

        Returns None when there is no published article with that id.
        """
        article = await self.session.get(Article, article_id)
        if article is None or article.status != ArticleStatus.PUBLISHED.value:
            return None
        if article.short_code:
            return article

        article.short_code = await self._free_code()
        await self.session.commit()
        await self.session.refresh(article)
        logger.info("Assigned short code %s to %s", article.short_code, article.slug)
        return article

    async def resolve(self, code: str) -> Article | None:
        """The published article behind a short code."""
        if not is_short_code(code):
            return None
        result = await self.session.execute(
            select(Article).where(
                Article.short_code == code,
                Article.status == ArticleStatus.PUBLISHED.value,
            )
        )
        return result.scalars().first()
