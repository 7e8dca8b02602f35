"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router, site_router
from app.config import get_settings
from app.exceptions import (
    ArticleValidationError,
    DuplicateSlugError,
    MediaValidationError,
    PickteumError,
    ShortLinkError,
    UnknownCategoryError,
)
from app.services.auth_service import AdminSessionStore

logger = logging.getLogger("app")

ERROR_STATUS = {
    ArticleValidationError: status.HTTP_400_BAD_REQUEST,
    MediaValidationError: status.HTTP_400_BAD_REQUEST,
    UnknownCategoryError: status.HTTP_404_NOT_FOUND,
    DuplicateSlugError: status.HTTP_409_CONFLICT,
    ShortLinkError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info("🚀 Starting %s in %s mode", settings.app_name, settings.environment)

    from app.db.postgres import async_session, init_db
    from app.db.storage import media_storage
    from app.services.category_service import CategoryService
    from app.services.scheduler_service import ScheduledPublisher

    await init_db()
    async with async_session() as session:
        await CategoryService(session).seed_defaults()
    logger.info("📦 Database tables initialized")

    try:
        await media_storage.create_bucket_if_not_exists()
        logger.info("📦 Media bucket ready")
    except Exception as e:
        logger.warning("⚠️ Media bucket init error (storage may be offline): %s", e)

    publisher = None
    if settings.scheduler_enabled:
        publisher = ScheduledPublisher(async_session, settings.scheduler_interval_seconds)
        publisher.start()
    app.state.publisher = publisher

    yield

    # Shutdown
    if publisher is not None:
        await publisher.stop()
    logger.info("👋 Shutting down...")


async def pickteum_error_handler(request: Request, exc: PickteumError) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_400_BAD_REQUEST,
    )
    return JSONResponse(status_code=code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Article feed, scheduled publishing and admin authoring API",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.admin_sessions = AdminSessionStore(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PickteumError, pickteum_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(site_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
