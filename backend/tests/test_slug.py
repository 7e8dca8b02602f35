"""Tests for slug derivation and de-duplication."""

import re

import pytest

from app.models import ArticleStatus
from app.services.slug_service import (
    FALLBACK_SLUG,
    next_available_slug,
    slug_exists,
    slugify,
    unique_slug,
)

SLUG_CHARS = re.compile(r"^[a-z0-9가-힣]+(-[a-z0-9가-힣]+)*$")


def test_slugify_mixed_title():
    slug = slugify("Hello, World! 테스트")

    assert slug == "hello-world-테스트"
    assert SLUG_CHARS.match(slug)


@pytest.mark.parametrize(
    "title",
    ["  --Leading and trailing--  ", "손흥민, 시즌 10호골!!", "A/B & C?", "2024 KBO 결산: Top-10"],
)
def test_slugify_never_leaves_stray_hyphens(title):
    slug = slugify(title)

    assert SLUG_CHARS.match(slug), slug
    assert not slug.startswith("-") and not slug.endswith("-")
    assert "--" not in slug


def test_slugify_without_usable_characters():
    assert slugify("!!! ???") == FALLBACK_SLUG


def test_next_available_slug_counts_up():
    assert next_available_slug("my-post", set()) == "my-post"
    assert next_available_slug("my-post", {"my-post"}) == "my-post-1"
    assert next_available_slug("my-post", {"my-post", "my-post-1"}) == "my-post-2"


@pytest.mark.asyncio
async def test_unique_slug_against_database(session, make_article):
    await make_article(slug="my-post")
    assert await unique_slug(session, "my-post") == "my-post-1"

    await make_article(slug="my-post-1")
    assert await unique_slug(session, "my-post") == "my-post-2"


@pytest.mark.asyncio
async def test_unique_slug_ignores_the_article_itself(session, make_article):
    article = await make_article(slug="my-post", status=ArticleStatus.DRAFT)

    assert await unique_slug(session, "my-post", exclude_id=article.id) == "my-post"
    assert await slug_exists(session, "my-post")
    assert not await slug_exists(session, "my-post", exclude_id=article.id)


@pytest.mark.asyncio
async def test_unique_slug_ignores_unrelated_prefixes(session, make_article):
    await make_article(slug="my-post-about-cats")

    assert await unique_slug(session, "my-post") == "my-post"
