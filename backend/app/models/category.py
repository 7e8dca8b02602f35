"""Category model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.clock import utcnow
from app.db.types import UTCTimestamp


class Category(SQLModel, table=True):
    """Article category. The name doubles as the public lookup key."""

    __tablename__ = "categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=50, unique=True, index=True)
    color: str = Field(default="#cccccc", max_length=20)
    order_index: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)
