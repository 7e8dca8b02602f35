"""Database and storage connections package."""

from app.db.postgres import async_session, engine, get_session, init_db, make_engine
from app.db.storage import MediaStorageClient, get_media_storage, media_storage
from app.db.types import UTCTimestamp

__all__ = [
    "get_session",
    "init_db",
    "engine",
    "async_session",
    "media_storage",
    "get_media_storage",
    "MediaStorageClient",
    "UTCTimestamp",
    "make_engine",
]
