"""Public category endpoint."""

from fastapi import APIRouter, Depends, Response

from app.api.deps import get_category_service
from app.schemas.category import CategoryListResponse
from app.services.category_service import CategoryService

router = APIRouter()


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    response: Response,
    service: CategoryService = Depends(get_category_service),
) -> CategoryListResponse:
    """List categories in display order."""
    response.headers["Cache-Control"] = "s-maxage=300, stale-while-revalidate=600"
    return CategoryListResponse(categories=await service.list_for_display())
