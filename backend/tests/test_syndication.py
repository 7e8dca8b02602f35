"""Tests for the RSS feed and sitemaps."""

from datetime import UTC, datetime, timedelta

import pytest
from lxml import etree

from app.clock import utcnow
from app.models import ArticleStatus
from app.services.syndication_service import (
    ATOM_NS,
    CONTENT_NS,
    NEWS_NS,
    SITEMAP_NS,
    SyndicationService,
    strip_html,
)

NS = {"sm": SITEMAP_NS, "news": NEWS_NS, "content": CONTENT_NS, "atom": ATOM_NS}
BASE = "https://www.pickteum.com"


def test_strip_html():
    assert strip_html("<p>Hello <b>world</b></p>\n\n<p>again</p>") == "Hello world again"
    assert strip_html(None) == ""


@pytest.mark.asyncio
async def test_rss_lists_published_articles_newest_first(session, categories, make_article):
    await make_article(slug="older", title="Older", category=categories["경제"])
    await make_article(
        slug="newer",
        title="Newer & <better>",
        content="<p>Full <b>body</b></p>",
        category=categories["테크"],
    )
    await make_article(slug="hidden", status=ArticleStatus.DRAFT)

    root = etree.fromstring(await SyndicationService(session).rss())

    assert root.tag == "rss"
    assert root.findtext("channel/title") == "픽틈"
    assert root.find("channel/atom:link", NS).get("href") == f"{BASE}/feed.xml"
    items = root.findall("channel/item")
    assert [item.findtext("link") for item in items] == [f"{BASE}/article/newer", f"{BASE}/article/older"]
    newest = items[0]
    assert newest.findtext("title") == "Newer & <better>"
    assert newest.findtext("description") == "Full body..."
    assert newest.findtext("content:encoded", namespaces=NS) == "<p>Full <b>body</b></p>"
    assert newest.findtext("category") == "테크"
    assert newest.find("guid").get("isPermaLink") == "true"
    assert newest.findtext("pubDate").endswith("GMT")


@pytest.mark.asyncio
async def test_rss_prefers_seo_description_and_defaults_category(session, make_article):
    await make_article(slug="seo", seo_description="Short summary")

    root = etree.fromstring(await SyndicationService(session).rss())

    item = root.find("channel/item")
    assert item.findtext("description") == "Short summary"
    assert item.findtext("category") == "뉴스"


@pytest.mark.asyncio
async def test_sitemap_has_pages_categories_and_articles(session, categories, make_article):
    await make_article(slug="live")
    await make_article(slug="draft", status=ArticleStatus.DRAFT)

    root = etree.fromstring(await SyndicationService(session).sitemap())

    locs = [loc.text for loc in root.findall("sm:url/sm:loc", NS)]
    assert locs[0] == BASE
    assert f"{BASE}/about" in locs
    assert f"{BASE}/category/%EC%8A%A4%ED%8F%AC%EC%B8%A0" in locs  # 스포츠
    assert f"{BASE}/article/live" in locs
    assert f"{BASE}/article/draft" not in locs


@pytest.mark.asyncio
async def test_news_sitemap_only_covers_recent_articles(session, categories, make_article):
    now = utcnow()
    await make_article(slug="fresh", title="Fresh", published_at=now - timedelta(hours=3), category=categories["건강"])
    await make_article(slug="stale", published_at=now - timedelta(days=3))

    root = etree.fromstring(await SyndicationService(session).news_sitemap(now=now))

    urls = root.findall("sm:url", NS)
    assert [url.findtext("sm:loc", namespaces=NS) for url in urls] == [f"{BASE}/article/fresh"]
    news = urls[0].find("news:news", NS)
    assert news.findtext("news:title", namespaces=NS) == "Fresh"
    assert news.findtext("news:keywords", namespaces=NS) == "건강"
    assert news.findtext("news:publication/news:name", namespaces=NS) == "픽틈"
    published = datetime.fromisoformat(news.findtext("news:publication_date", namespaces=NS))
    assert published == (now - timedelta(hours=3)).astimezone(UTC)


@pytest.mark.asyncio
async def test_feed_endpoints_serve_xml(client, make_article):
    await make_article(slug="live")

    for path in ("/feed.xml", "/sitemap.xml", "/news-sitemap.xml"):
        response = await client.get(path)

        assert response.status_code == 200, path
        assert response.headers["content-type"].startswith("application/xml")
        assert "max-age=" in response.headers["cache-control"]
        assert response.content.startswith(b"<?xml")
