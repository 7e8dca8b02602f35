"""Tests for the public feed pager."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.config import get_settings
from app.exceptions import UnknownCategoryError
from app.models import ArticleStatus
from app.schemas.article import ArticleSummary, CategoryBadge
from app.services.feed_service import (
    FeedPager,
    FeedService,
    merge_feed_pages,
    resolve_thumbnail_url,
)


def card(card_id: str) -> ArticleSummary:
    return ArticleSummary(
        id=card_id,
        title=card_id,
        category=CategoryBadge(name="테크", color="#607D8B"),
        thumbnail="/placeholder.svg",
        date="2025.01.01",
    )


@pytest.mark.asyncio
async def test_pages_are_newest_first_and_bounded(session, make_article):
    for _ in range(7):
        await make_article()
    service = FeedService(session)

    first = await service.get_feed_page(page=1, limit=3)
    second = await service.get_feed_page(page=2, limit=3)
    third = await service.get_feed_page(page=3, limit=3)

    assert [a.id for a in first.articles] == ["article-7", "article-6", "article-5"]
    assert [a.id for a in second.articles] == ["article-4", "article-3", "article-2"]
    assert [a.id for a in third.articles] == ["article-1"]
    assert first.has_more and second.has_more
    assert not third.has_more
    assert first.total == 7


@pytest.mark.asyncio
async def test_has_more_is_a_heuristic_on_an_exactly_full_last_page(session, make_article):
    for _ in range(4):
        await make_article()
    service = FeedService(session)

    last = await service.get_feed_page(page=2, limit=2)
    beyond = await service.get_feed_page(page=3, limit=2)

    assert len(last.articles) == 2
    assert last.has_more is True
    assert beyond.articles == []
    assert beyond.has_more is False


@pytest.mark.asyncio
async def test_only_published_articles_are_listed(session, make_article):
    await make_article(slug="live")
    await make_article(slug="draft", status=ArticleStatus.DRAFT)
    await make_article(
        slug="later", status=ArticleStatus.SCHEDULED, published_at=datetime(2999, 1, 1, tzinfo=UTC)
    )

    page = await FeedService(session).get_feed_page(page=1, limit=10)

    assert [a.id for a in page.articles] == ["live"]


@pytest.mark.asyncio
async def test_category_filter_and_badge(session, categories, make_article):
    sports = categories["스포츠"]
    await make_article(slug="match-report", category=sports)
    await make_article(slug="gadget-review", category=categories["테크"])
    await make_article(slug="no-category")
    service = FeedService(session)

    page = await service.get_feed_page(page=1, limit=5, category="스포츠")
    everything = await service.get_feed_page(page=1, limit=5, category="all")
    korean_all = await service.get_feed_page(page=1, limit=5, category="전체")

    assert [a.id for a in page.articles] == ["match-report"]
    assert page.articles[0].category == CategoryBadge(name="스포츠", color="#2196F3")
    assert len(everything.articles) == 3
    assert len(korean_all.articles) == 3
    uncategorized = next(a for a in everything.articles if a.id == "no-category")
    assert uncategorized.category == CategoryBadge(name="미분류", color="#cccccc")


@pytest.mark.asyncio
async def test_unknown_category_is_an_error(session, categories, make_article):
    await make_article()

    with pytest.raises(UnknownCategoryError):
        await FeedService(session).get_feed_page(page=1, limit=5, category="없는카테고리")


@pytest.mark.asyncio
@pytest.mark.parametrize("page,limit", [(0, 5), (1, 0), (1, 21)])
async def test_invalid_parameters_are_rejected(session, page, limit):
    with pytest.raises(ValueError):
        await FeedService(session).get_feed_page(page=page, limit=limit)


@pytest.mark.asyncio
async def test_database_failure_gives_an_empty_final_page(session):
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))

    page = await FeedService(session).get_feed_page(page=2, limit=5)

    assert page.articles == []
    assert page.has_more is False
    assert page.page == 2


@pytest.mark.asyncio
async def test_summary_formats_date_in_display_timezone(session, make_article):
    # 2025-03-01 20:00 UTC is already March 2nd in Seoul
    await make_article(published_at=datetime(2025, 3, 1, 20, 0, tzinfo=UTC))

    page = await FeedService(session).get_feed_page(page=1, limit=5)

    assert page.articles[0].date == "2025.03.02"
    assert page.articles[0].published_at == datetime(2025, 3, 1, 20, 0, tzinfo=UTC)


def test_resolve_thumbnail_url():
    settings = get_settings()
    bucket_base = f"{settings.storage_public_url.rstrip('/')}/{settings.media_bucket}"

    assert resolve_thumbnail_url(None, settings) == "/placeholder.svg"
    assert resolve_thumbnail_url("https://cdn.example.com/a.png", settings) == "https://cdn.example.com/a.png"
    assert resolve_thumbnail_url("/images/a.png", settings) == f"{settings.site_base_url}/images/a.png"
    assert resolve_thumbnail_url("thumbnails/a.png", settings) == f"{bucket_base}/thumbnails/a.png"


def test_merge_drops_cards_already_loaded():
    merged = merge_feed_pages([card("a"), card("b")], [card("b"), card("c"), card("c")])

    assert [c.id for c in merged] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_pager_never_holds_duplicates_when_pages_shift(session, make_article):
    for _ in range(5):
        await make_article()
    service = FeedService(session)
    pager = FeedPager(fetch_page=service.get_feed_page, limit=2)

    first = await pager.load_next()
    # A new publish pushes every older article down by one position
    await make_article(slug="breaking")
    second = await pager.load_next()
    while pager.has_more:
        await pager.load_next()

    ids = [item.id for item in pager.items]
    assert [c.id for c in first] == ["article-5", "article-4"]
    assert [c.id for c in second] == ["article-3"]
    assert len(ids) == len(set(ids))
    assert set(ids) == {f"article-{n}" for n in range(1, 6)}


@pytest.mark.asyncio
async def test_pager_reset_switches_category(session, categories, make_article):
    await make_article(slug="health-tip", category=categories["건강"])
    await make_article(slug="economy-news", category=categories["경제"])
    pager = FeedPager(fetch_page=FeedService(session).get_feed_page, limit=5)

    await pager.load_next()
    pager.reset("건강")
    await pager.load_next()

    assert [item.id for item in pager.items] == ["health-tip"]
    assert pager.page == 1
    assert pager.has_more is False
    assert await pager.load_next() == []
