"""Public article endpoints: the feed, single articles and view counts."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_feed_service
from app.constants.defaults import ALL_CATEGORIES
from app.schemas.article import (
    ArticleDetail,
    ArticleListResponse,
    FeedPageResponse,
    SearchResponse,
    ViewCountResponse,
)
from app.services.feed_service import FeedService

router = APIRouter()
search_router = APIRouter()


@router.get("", response_model=FeedPageResponse)
async def list_feed(
    response: Response,
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    category: str = Query(default=ALL_CATEGORIES),
    service: FeedService = Depends(get_feed_service),
) -> FeedPageResponse:
    """
    One page of published articles for the infinite-scroll feed.

    - category: display name, or "all"
    - hasMore: true when the page came back full
    """
    try:
        feed_page = await service.get_feed_page(page=page, limit=limit, category=category)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    response.headers["Cache-Control"] = "s-maxage=60, stale-while-revalidate=300"
    return FeedPageResponse(
        articles=feed_page.articles,
        has_more=feed_page.has_more,
        page=feed_page.page,
        category=feed_page.category,
        total=feed_page.total,
    )


@router.get("/popular", response_model=ArticleListResponse)
async def popular_articles(
    response: Response,
    limit: int = Query(default=5, ge=1, le=20),
    service: FeedService = Depends(get_feed_service),
) -> ArticleListResponse:
    """Most viewed published articles."""
    response.headers["Cache-Control"] = "s-maxage=180, stale-while-revalidate=360"
    return ArticleListResponse(articles=await service.popular(limit))


@router.get("/{article_id}", response_model=ArticleDetail)
async def get_article(
    article_id: str,
    service: FeedService = Depends(get_feed_service),
) -> ArticleDetail:
    """Get a published article by UUID or slug."""
    article = await service.get_article(article_id)
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return article


@router.get("/{article_id}/related", response_model=ArticleListResponse)
async def related_articles(
    response: Response,
    article_id: UUID,
    category_id: UUID = Query(..., alias="categoryId"),
    limit: int = Query(default=5, ge=1, le=20),
    service: FeedService = Depends(get_feed_service),
) -> ArticleListResponse:
    """Other published articles from the same category."""
    response.headers["Cache-Control"] = "s-maxage=120, stale-while-revalidate=300"
    return ArticleListResponse(articles=await service.related(article_id, category_id, limit))


@router.post("/{article_id}/views", response_model=ViewCountResponse)
async def record_view(
    article_id: str,
    service: FeedService = Depends(get_feed_service),
) -> ViewCountResponse:
    """Count a view. Always answers 200 so readers never see a failure."""
    if await service.record_view(article_id):
        return ViewCountResponse(success=True)
    return ViewCountResponse(
        success=False, silent=True, message="View count update failed but request completed"
    )


@search_router.get("/search", response_model=SearchResponse)
async def search_articles(
    response: Response,
    q: str = "",
    limit: int = Query(default=5, ge=1, le=20),
    service: FeedService = Depends(get_feed_service),
) -> SearchResponse:
    """Search published article titles."""
    response.headers["Cache-Control"] = "s-maxage=30, stale-while-revalidate=60"
    return SearchResponse(articles=await service.search(q, limit), query=q)
