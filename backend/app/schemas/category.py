"""Category schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryResponse(BaseModel):
    """Category as returned by the API. The default set has no id until seeded."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    name: str
    color: str
    order_index: int = 0
    created_at: datetime | None = None


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(default="#cccccc", pattern=COLOR_PATTERN)
    order_index: int | None = Field(default=None, ge=0)


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)
    order_index: int | None = Field(default=None, ge=0)
