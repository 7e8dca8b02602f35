"""Admin endpoints: login, article authoring and categories."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_article_service,
    get_category_service,
    get_db,
    get_session_store,
    require_admin,
)
from app.models import ArticleStatus
from app.schemas.article import (
    AdminArticleListResponse,
    ArticleCreate,
    ArticleDraft,
    ArticleResponse,
    ArticleUpdate,
    AutosaveResponse,
    ScheduleRequest,
)
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services.article_service import ArticleService
from app.services.auth_service import AdminSession, AdminSessionStore
from app.services.autosave_service import autosave_draft
from app.services.category_service import CategoryService
from app.services.feed_service import category_badge

router = APIRouter()


def _not_found(what: str, item_id: UUID) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} {item_id} not found")


# Session


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    store: AdminSessionStore = Depends(get_session_store),
) -> LoginResponse:
    """Exchange the admin credentials for a bearer token."""
    session = store.login(credentials.username, credentials.password)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return LoginResponse(
        access_token=session.token, username=session.username, expires_at=session.expires_at
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    store: AdminSessionStore = Depends(get_session_store),
    admin: AdminSession = Depends(require_admin),
) -> None:
    """Revoke the current token."""
    store.logout(admin.token)


# Articles


@router.get("/articles", response_model=AdminArticleListResponse)
async def list_articles(
    status_filter: ArticleStatus | None = Query(default=None, alias="status"),
    q: str | None = None,
    category: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> AdminArticleListResponse:
    """All articles for the content table, newest first."""
    rows, total = await service.list_articles(
        status=status_filter, search=q, category=category, limit=limit, offset=offset
    )
    articles = []
    for article, category_row in rows:
        item = ArticleResponse.model_validate(article)
        item.category = category_badge(category_row) if category_row else None
        articles.append(item)
    return AdminArticleListResponse(articles=articles, total=total)


@router.post("/articles", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    article_in: ArticleCreate,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> ArticleResponse:
    """Create a draft, published or scheduled article."""
    article = await service.create(article_in)
    return await service.to_response(article)


@router.get("/articles/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: UUID,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> ArticleResponse:
    """Get any article, whatever its status."""
    article = await service.get(article_id)
    if not article:
        raise _not_found("Article", article_id)
    return await service.to_response(article)


@router.put("/articles/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: UUID,
    article_in: ArticleUpdate,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> ArticleResponse:
    """Save the editor (partial update)."""
    article = await service.update(article_id, article_in)
    if not article:
        raise _not_found("Article", article_id)
    return await service.to_response(article)


@router.delete("/articles/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: UUID,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> None:
    """Delete an article permanently."""
    if not await service.delete(article_id):
        raise _not_found("Article", article_id)


@router.post("/articles/{article_id}/publish", response_model=ArticleResponse)
async def publish_article(
    article_id: UUID,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> ArticleResponse:
    """Publish now."""
    article = await service.publish(article_id)
    if not article:
        raise _not_found("Article", article_id)
    return await service.to_response(article)


@router.post("/articles/{article_id}/schedule", response_model=ArticleResponse)
async def schedule_article(
    article_id: UUID,
    request: ScheduleRequest,
    service: ArticleService = Depends(get_article_service),
    admin: AdminSession = Depends(require_admin),
) -> ArticleResponse:
    """Publish automatically at a future time."""
    article = await service.schedule(article_id, request.published_at)
    if not article:
        raise _not_found("Article", article_id)
    return await service.to_response(article)


@router.put("/articles/{article_id}/autosave", response_model=AutosaveResponse)
async def autosave_article(
    article_id: UUID,
    draft: ArticleDraft,
    db: AsyncSession = Depends(get_db),
    admin: AdminSession = Depends(require_admin),
) -> AutosaveResponse:
    """Autosave the open editor. Problems are reported in the body, never as errors."""
    result = await autosave_draft(db, article_id, draft)
    return AutosaveResponse(saved=result.saved, saved_at=result.saved_at, reason=result.reason)


# Categories


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    admin: AdminSession = Depends(require_admin),
) -> CategoryResponse:
    """Add a category."""
    try:
        category = await service.create(category_in)
    except IntegrityError:
        await service.session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category {category_in.name} already exists",
        )
    return CategoryResponse.model_validate(category)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    category_in: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    admin: AdminSession = Depends(require_admin),
) -> CategoryResponse:
    """Rename, recolor or reorder a category."""
    try:
        category = await service.update(category_id, category_in)
    except IntegrityError:
        await service.session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category {category_in.name} already exists",
        )
    if not category:
        raise _not_found("Category", category_id)
    return CategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),
    admin: AdminSession = Depends(require_admin),
) -> None:
    """Delete a category; its articles become uncategorized."""
    if not await service.delete(category_id):
        raise _not_found("Category", category_id)
