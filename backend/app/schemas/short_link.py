"""Short link schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ShortLinkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    article_id: UUID = Field(..., alias="articleId")


class ShortLinkResponse(BaseModel):
    """Short and canonical URLs of an article."""

    model_config = ConfigDict(populate_by_name=True)

    short_url: str = Field(..., alias="shortUrl")
    short_code: str = Field(..., alias="shortCode")
    original_url: str = Field(..., alias="originalUrl")
    title: str
