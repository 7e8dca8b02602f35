"""URL slugs derived from article titles."""

import re
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from app.models import Article

_DISALLOWED = re.compile(r"[^a-z0-9가-힣]")
_DASH_RUNS = re.compile(r"-+")

FALLBACK_SLUG = "untitled"


def slugify(title: str) -> str:
    """
    Turn a title into a slug of lowercase letters, digits, Hangul syllables and hyphens.

    >>> slugify("Hello, World! 테스트")
    'hello-world-테스트'
    """
    slug = _DISALLOWED.sub("-", title.lower())
    slug = _DASH_RUNS.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


def next_available_slug(base: str, taken: set[str]) -> str:
    """Return base, or base-1, base-2, ... whichever is first not in taken."""
    if base not in taken:
        return base
    counter = 1
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"


async def slug_exists(
    session: AsyncSession, slug: str, exclude_id: UUID | None = None
) -> bool:
    """Check whether another article already uses slug."""
    query = select(Article.id).where(Article.slug == slug)
    if exclude_id is not None:
        query = query.where(Article.id != exclude_id)
    result = await session.execute(query.limit(1))
    return result.first() is not None


async def unique_slug(
    session: AsyncSession, base: str, exclude_id: UUID | None = None
) -> str:
    """Make base unique against the stored slugs, ignoring the article exclude_id."""
    query = select(Article.slug).where(
        (Article.slug == base) | col(Article.slug).startswith(f"{base}-", autoescape=True)
    )
    if exclude_id is not None:
        query = query.where(Article.id != exclude_id)
    result = await session.execute(query)
    taken = set(result.scalars().all())
    return next_available_slug(base, taken)
