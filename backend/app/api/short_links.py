"""Short links: create them for sharing and redirect them to articles."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from app.api.deps import get_short_link_service
from app.config import get_settings
from app.schemas.short_link import ShortLinkRequest, ShortLinkResponse
from app.services.short_link_service import ShortLinkService

router = APIRouter()
redirect_router = APIRouter()


@router.post("", response_model=ShortLinkResponse)
async def create_short_link(
    request: ShortLinkRequest,
    service: ShortLinkService = Depends(get_short_link_service),
) -> ShortLinkResponse:
    """Get the short link of a published article, creating it on first use."""
    article = await service.shorten(request.article_id)
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")

    base_url = get_settings().site_base_url.rstrip("/")
    return ShortLinkResponse(
        short_url=f"{base_url}/s/{article.short_code}",
        short_code=article.short_code,
        original_url=f"{base_url}/article/{article.public_id}",
        title=article.title,
    )


@redirect_router.get("/s/{code}", response_class=RedirectResponse)
async def follow_short_link(
    code: str,
    service: ShortLinkService = Depends(get_short_link_service),
) -> RedirectResponse:
    """Redirect a short link to the article page."""
    article = await service.resolve(code)
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short link not found")

    base_url = get_settings().site_base_url.rstrip("/")
    return RedirectResponse(
        f"{base_url}/article/{article.public_id}",
        status_code=status.HTTP_301_MOVED_PERMANENTLY,
    )
