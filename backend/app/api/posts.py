"""Scheduled-publish trigger."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.postgres import get_session as get_db
from app.schemas.publishing import PublishScheduledResponse
from app.services.scheduler_service import publish_due_articles

logger = logging.getLogger(__name__)

router = APIRouter()


async def _publish_scheduled(db: AsyncSession):
    try:
        result = await publish_due_articles(db)
    except SQLAlchemyError as e:
        logger.exception("Scheduled publish sweep failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e.__class__.__name__)},
        )

    if result.count == 0:
        message = "발행할 예약된 글이 없습니다."
    else:
        message = f"{result.count}개 글이 성공적으로 발행되었습니다."
    return PublishScheduledResponse(
        success=True,
        message=message,
        published_count=result.count,
        published_articles=result.articles,
    )


@router.post("/publish-scheduled", response_model=PublishScheduledResponse)
async def publish_scheduled(db: AsyncSession = Depends(get_db)):
    """Run one scheduled-publish sweep now."""
    return await _publish_scheduled(db)


@router.get("/publish-scheduled", response_model=PublishScheduledResponse)
async def publish_scheduled_get(db: AsyncSession = Depends(get_db)):
    """Same as POST, for triggering from a browser."""
    return await _publish_scheduled(db)
