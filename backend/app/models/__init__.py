"""Models package - SQLModel database models."""

from app.models.article import Article, ArticleStatus
from app.models.category import Category
from app.models.media import MediaAsset

__all__ = ["Article", "ArticleStatus", "Category", "MediaAsset"]
