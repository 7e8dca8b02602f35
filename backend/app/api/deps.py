"""FastAPI dependencies shared by the routers."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.postgres import get_session as get_db
from app.db.storage import MediaStorageClient, get_media_storage
from app.services.article_service import ArticleService
from app.services.auth_service import AdminSession, AdminSessionStore
from app.services.category_service import CategoryService
from app.services.feed_service import FeedService
from app.services.media_service import MediaService
from app.services.short_link_service import ShortLinkService
from app.services.syndication_service import SyndicationService

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_store(request: Request) -> AdminSessionStore:
    return request.app.state.admin_sessions


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: AdminSessionStore = Depends(get_session_store),
) -> AdminSession:
    """Resolve the admin session from the bearer token."""
    session = store.get(credentials.credentials) if credentials else None
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin login required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_feed_service(db: AsyncSession = Depends(get_db)) -> FeedService:
    return FeedService(db)


async def get_article_service(db: AsyncSession = Depends(get_db)) -> ArticleService:
    return ArticleService(db)


async def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


async def get_media_service(
    db: AsyncSession = Depends(get_db),
    storage: MediaStorageClient = Depends(get_media_storage),
) -> MediaService:
    return MediaService(db, storage)


async def get_syndication_service(db: AsyncSession = Depends(get_db)) -> SyndicationService:
    return SyndicationService(db)


async def get_short_link_service(db: AsyncSession = Depends(get_db)) -> ShortLinkService:
    return ShortLinkService(db)
