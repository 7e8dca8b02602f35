"""RSS feed and sitemaps built from the published articles."""

import logging
import re
from datetime import datetime, timedelta
from email.utils import format_datetime
from urllib.parse import quote

from lxml import etree
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from app.clock import to_aware_utc, utcnow
from app.config import Settings, get_settings
from app.models import Article, ArticleStatus, Category
from app.services.category_service import CategoryService

logger = logging.getLogger(__name__)

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
ATOM_NS = "http://www.w3.org/2005/Atom"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
NEWS_NS = "http://www.google.com/schemas/sitemap-news/0.9"

DEFAULT_FEED_CATEGORY = "뉴스"
DESCRIPTION_LENGTH = 200

# (path, changefreq, priority)
STATIC_PAGES = [
    ("", "daily", "1.0"),
    ("/about", "monthly", "0.8"),
    ("/contact", "monthly", "0.7"),
    ("/terms", "monthly", "0.5"),
    ("/privacy", "monthly", "0.5"),
]

_TAGS = re.compile(r"<[^>]*>")
_SPACES = re.compile(r"\s+")


def strip_html(html: str | None) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    return _SPACES.sub(" ", _TAGS.sub("", html)).strip()


def summarize(article: Article) -> str:
    if article.seo_description:
        return article.seo_description
    return strip_html(article.content)[:DESCRIPTION_LENGTH] + "..."


def _cdata(text: str):
    # CDATA sections cannot contain their own terminator
    return text if "]]>" in text else etree.CDATA(text)


def _sub(parent, tag: str, text=None, **attrib):
    element = etree.SubElement(parent, tag, **attrib)
    if text is not None:
        element.text = text
    return element


def _serialize(root) -> bytes:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)


class SyndicationService:
    """Builds the XML documents crawlers and feed readers fetch."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.base_url = self.settings.site_base_url.rstrip("/")

    def article_url(self, article: Article) -> str:
        return f"{self.base_url}/article/{article.public_id}"

    async def _published(self, limit: int, since: datetime | None = None):
        query = (
            select(Article, Category)
            .outerjoin(Category, Article.category_id == Category.id)
            .where(Article.status == ArticleStatus.PUBLISHED.value)
        )
        if since is not None:
            query = query.where(col(Article.published_at) >= since)
        query = query.order_by(col(Article.published_at).desc()).limit(limit)
        return (await self.session.execute(query)).all()

    async def rss(self, now: datetime | None = None) -> bytes:
        """RSS 2.0 feed of the newest published articles."""
        now = now or utcnow()
        rows = await self._published(self.settings.rss_item_limit)
        site, email = self.settings.site_name, self.settings.contact_email

        rss = etree.Element("rss", version="2.0", nsmap={"content": CONTENT_NS, "atom": ATOM_NS})
        channel = _sub(rss, "channel")
        _sub(channel, "title", site)
        _sub(channel, "description", self.settings.site_description)
        _sub(channel, "link", self.base_url)
        _sub(channel, "language", "ko-KR")
        _sub(channel, "lastBuildDate", format_datetime(now, usegmt=True))
        _sub(
            channel,
            f"{{{ATOM_NS}}}link",
            href=f"{self.base_url}/feed.xml",
            rel="self",
            type="application/rss+xml",
        )
        _sub(channel, "managingEditor", f"{email} ({site})")
        _sub(channel, "webMaster", f"{email} ({site})")
        _sub(channel, "copyright", f"© {now.year} {site}. All rights reserved.")
        _sub(channel, "category", DEFAULT_FEED_CATEGORY)

        for article, category in rows:
            url = self.article_url(article)
            item = _sub(channel, "item")
            _sub(item, "title", _cdata(article.title))
            _sub(item, "description", _cdata(summarize(article)))
            _sub(item, f"{{{CONTENT_NS}}}encoded", _cdata(article.content or ""))
            _sub(item, "link", url)
            _sub(item, "guid", url, isPermaLink="true")
            _sub(item, "pubDate", format_datetime(to_aware_utc(article.published_at), usegmt=True))
            _sub(item, "category", _cdata(category.name if category else DEFAULT_FEED_CATEGORY))
            _sub(item, "source", site, url=f"{self.base_url}/feed.xml")

        logger.debug("Built RSS feed with %d items", len(rows))
        return _serialize(rss)

    async def sitemap(self, now: datetime | None = None) -> bytes:
        """Static pages, category pages and published articles."""
        now = now or utcnow()
        today = now.isoformat()
        urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS})

        def add(loc: str, lastmod: str, changefreq: str, priority: str) -> None:
            url = _sub(urlset, f"{{{SITEMAP_NS}}}url")
            _sub(url, f"{{{SITEMAP_NS}}}loc", loc)
            _sub(url, f"{{{SITEMAP_NS}}}lastmod", lastmod)
            _sub(url, f"{{{SITEMAP_NS}}}changefreq", changefreq)
            _sub(url, f"{{{SITEMAP_NS}}}priority", priority)

        for path, changefreq, priority in STATIC_PAGES:
            add(f"{self.base_url}{path}", today, changefreq, priority)
        for category in await CategoryService(self.session).list_categories():
            add(f"{self.base_url}/category/{quote(category.name, safe='')}", today, "daily", "0.9")
        for article, _ in await self._published(self.settings.sitemap_article_limit):
            add(self.article_url(article), to_aware_utc(article.updated_at).isoformat(), "weekly", "0.7")

        return _serialize(urlset)

    async def news_sitemap(self, now: datetime | None = None) -> bytes:
        """Google News sitemap of the articles published in the last few days."""
        now = now or utcnow()
        since = now - timedelta(days=self.settings.news_sitemap_days)
        rows = await self._published(self.settings.news_sitemap_limit, since=since)
        urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS, "news": NEWS_NS})

        for article, category in rows:
            published = to_aware_utc(article.published_at or article.created_at).isoformat()
            url = _sub(urlset, f"{{{SITEMAP_NS}}}url")
            _sub(url, f"{{{SITEMAP_NS}}}loc", self.article_url(article))
            news = _sub(url, f"{{{NEWS_NS}}}news")
            publication = _sub(news, f"{{{NEWS_NS}}}publication")
            _sub(publication, f"{{{NEWS_NS}}}name", self.settings.site_name)
            _sub(publication, f"{{{NEWS_NS}}}language", "ko")
            _sub(news, f"{{{NEWS_NS}}}publication_date", published)
            _sub(news, f"{{{NEWS_NS}}}title", _cdata(article.title))
            _sub(news, f"{{{NEWS_NS}}}keywords", category.name if category else DEFAULT_FEED_CATEGORY)
            _sub(url, f"{{{SITEMAP_NS}}}lastmod", to_aware_utc(article.updated_at).isoformat())
            _sub(url, f"{{{SITEMAP_NS}}}changefreq", "hourly")
            _sub(url, f"{{{SITEMAP_NS}}}priority", "1.0")

        return _serialize(urlset)
