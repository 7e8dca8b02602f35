"""Media asset metadata. The bytes live in the object store."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.clock import utcnow
from app.db.types import UTCTimestamp


class MediaAsset(SQLModel, table=True):
    """Uploaded image."""

    __tablename__ = "media_assets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(max_length=500, unique=True, index=True)
    url: str = Field(max_length=2048)
    content_type: str = Field(max_length=100)
    size: int = Field(ge=0)
    uploaded_by: str = Field(max_length=100)
    uploaded_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)
