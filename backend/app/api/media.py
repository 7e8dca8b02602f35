"""Admin media library endpoints."""

import logging
from uuid import UUID

from botocore.exceptions import ClientError
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.deps import get_media_service, require_admin
from app.schemas.media import MediaListResponse, MediaResponse
from app.services.auth_service import AdminSession
from app.services.media_service import MediaService, read_upload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=MediaListResponse)
async def list_media(
    service: MediaService = Depends(get_media_service),
    admin: AdminSession = Depends(require_admin),
) -> MediaListResponse:
    """List uploaded images with the articles that use them."""
    assets = await service.list_media()
    usage = await service.usage([asset.url for asset in assets])
    media = [
        MediaResponse.model_validate(asset).model_copy(update={"used_in": usage[asset.url]})
        for asset in assets
    ]
    return MediaListResponse(media=media, total=len(media))


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    service: MediaService = Depends(get_media_service),
    admin: AdminSession = Depends(require_admin),
) -> MediaResponse:
    """Upload an image (5MB max)."""
    body = await read_upload(file, service.settings.media_max_bytes)
    try:
        asset = await service.upload(
            filename=file.filename or "upload",
            content_type=file.content_type,
            body=body,
            uploaded_by=admin.username,
        )
    except ClientError as e:
        logger.exception("Media upload to object storage failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Storage upload failed") from e
    return MediaResponse.model_validate(asset)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: UUID,
    service: MediaService = Depends(get_media_service),
    admin: AdminSession = Depends(require_admin),
) -> None:
    """Delete an image from storage and the library."""
    try:
        deleted = await service.delete(media_id)
    except ClientError as e:
        logger.exception("Media delete from object storage failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Storage delete failed") from e
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Media {media_id} not found")
