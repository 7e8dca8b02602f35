"""RSS feed and sitemaps, served from the site root."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_syndication_service
from app.services.syndication_service import SyndicationService

logger = logging.getLogger(__name__)

router = APIRouter()

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


async def _xml(build: Callable[[], Awaitable[bytes]], name: str, max_age: int) -> Response:
    try:
        body = await build()
    except SQLAlchemyError:
        logger.exception("Failed to build %s", name)
        return Response("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(
        body,
        media_type=XML_MEDIA_TYPE,
        headers={"Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}"},
    )


@router.get("/feed.xml", response_class=Response)
async def rss_feed(service: SyndicationService = Depends(get_syndication_service)) -> Response:
    """RSS 2.0 feed of the latest articles."""
    return await _xml(service.rss, "RSS feed", 3600)


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(service: SyndicationService = Depends(get_syndication_service)) -> Response:
    """Sitemap of pages, categories and articles."""
    return await _xml(service.sitemap, "sitemap", 3600)


@router.get("/news-sitemap.xml", response_class=Response)
async def news_sitemap(service: SyndicationService = Depends(get_syndication_service)) -> Response:
    """Google News sitemap of recent articles."""
    return await _xml(service.news_sitemap, "news sitemap", 1800)
