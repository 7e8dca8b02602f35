"""Image uploads: validation, storage and usage lookup."""

import logging
import secrets
import time
from pathlib import PurePath
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.config import Settings, get_settings
from app.db.storage import MediaStorageClient
from app.exceptions import MediaValidationError
from app.models import Article, MediaAsset

logger = logging.getLogger(__name__)


def build_media_key(filename: str, now_ms: int | None = None) -> str:
    """Storage key like thumbnails/1718000000000_k3j2h1.jpg."""
    ext = PurePath(filename).suffix.lstrip(".").lower() or "bin"
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"thumbnails/{now_ms}_{secrets.token_hex(6)}.{ext}"


def validate_image(content_type: str | None, size: int, max_bytes: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise MediaValidationError("Only image files can be uploaded (JPG, PNG, GIF, WebP)")
    if size == 0:
        raise MediaValidationError("The uploaded file is empty")
    if size > max_bytes:
        raise MediaValidationError(f"Images must be {max_bytes // (1024 * 1024)}MB or smaller")


async def read_upload(upload, max_bytes: int) -> bytes:
    """
    Read an uploaded file, refusing to buffer more than max_bytes of it.

    upload is anything with an async read(size), such as a FastAPI UploadFile.
    """
    body = await upload.read(max_bytes + 1)
    if len(body) > max_bytes:
        raise MediaValidationError(f"Images must be {max_bytes // (1024 * 1024)}MB or smaller")
    return body


class MediaService:
    """Service for the admin media library."""

    def __init__(
        self,
        session: AsyncSession,
        storage: MediaStorageClient,
        settings: Settings | None = None,
    ):
        self.session = session
        self.storage = storage
        self.settings = settings or get_settings()

    async def upload(
        self, filename: str, content_type: str | None, body: bytes, uploaded_by: str
    ) -> MediaAsset:
        """Validate, store and record an image."""
        validate_image(content_type, len(body), self.settings.media_max_bytes)

        key = build_media_key(filename)
        url = await self.storage.upload(key, body, content_type)

        asset = MediaAsset(
            key=key,
            url=url,
            content_type=content_type,
            size=len(body),
            uploaded_by=uploaded_by,
        )
        self.session.add(asset)
        try:
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Recording %s failed, removing the stored object", key)
            await self.session.rollback()
            await self.storage.delete(key)
            raise
        await self.session.refresh(asset)
        logger.info("Uploaded %s (%d bytes) by %s", key, asset.size, uploaded_by)
        return asset

    async def list_media(self) -> list[MediaAsset]:
        result = await self.session.execute(
            select(MediaAsset).order_by(MediaAsset.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def usage(self, urls: list[str]) -> dict[str, list[str]]:
        """
        Titles of the articles using each URL, as thumbnail or inside the content.

        Scans all articles once for the whole batch of URLs.
        """
        usage: dict[str, list[str]] = {url: [] for url in urls}
        if not urls:
            return usage

        result = await self.session.execute(
            select(Article.title, Article.thumbnail, Article.content)
        )
        for title, thumbnail, content in result.all():
            for url in urls:
                if thumbnail == url or (content and url in content):
                    usage[url].append(title)
        return usage

    async def delete(self, media_id: UUID) -> bool:
        asset = await self.session.get(MediaAsset, media_id)
        if not asset:
            return False

        await self.storage.delete(asset.key)
        await self.session.delete(asset)
        await self.session.commit()
        logger.info("Deleted media %s", asset.key)
        return True
