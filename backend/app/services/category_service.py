"""Category lookup, seeding and admin maintenance."""

import logging
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.constants.defaults import ALL_CATEGORY_ALIASES, DEFAULT_CATEGORIES
from app.exceptions import UnknownCategoryError
from app.models import Article, Category
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)


def is_all_categories(category: str | None) -> bool:
    """True for the feed's "no filter" sentinel."""
    return category is None or category.strip() in ALL_CATEGORY_ALIASES


class CategoryService:
    """Service for reading and maintaining categories."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_categories(self) -> list[Category]:
        """All categories in display order."""
        result = await self.session.execute(
            select(Category).order_by(Category.order_index, Category.created_at)
        )
        return list(result.scalars().all())

    async def list_for_display(self) -> list[CategoryResponse]:
        """
        Categories for the public API.

        A database failure falls back to the default set so the site keeps
        rendering its category bar.
        """
        try:
            categories = await self.list_categories()
        except SQLAlchemyError:
            logger.exception("Failed to load categories, serving defaults")
            return [
                CategoryResponse(name=c["name"], color=c["color"], order_index=i)
                for i, c in enumerate(DEFAULT_CATEGORIES)
            ]
        return [CategoryResponse.model_validate(c) for c in categories]

    async def get_by_name(self, name: str) -> Category | None:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def get(self, category_id: UUID) -> Category | None:
        return await self.session.get(Category, category_id)

    async def resolve_id(self, name: str) -> UUID:
        """Translate a display name to its id, raising for unknown names."""
        category = await self.get_by_name(name.strip())
        if category is None:
            raise UnknownCategoryError(name)
        return category.id

    async def seed_defaults(self) -> int:
        """Insert the default categories when the table is empty."""
        count = (await self.session.execute(select(func.count(Category.id)))).scalar() or 0
        if count:
            return 0

        for index, data in enumerate(DEFAULT_CATEGORIES):
            self.session.add(Category(name=data["name"], color=data["color"], order_index=index))
        await self.session.commit()
        logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
        return len(DEFAULT_CATEGORIES)

    async def create(self, data: CategoryCreate) -> Category:
        order_index = data.order_index
        if order_index is None:
            current_max = (
                await self.session.execute(select(func.max(Category.order_index)))
            ).scalar()
            order_index = 0 if current_max is None else current_max + 1

        category = Category(name=data.name.strip(), color=data.color, order_index=order_index)
        self.session.add(category)
        await self.session.commit()
        await self.session.refresh(category)
        return category

    async def update(self, category_id: UUID, data: CategoryUpdate) -> Category | None:
        category = await self.get(category_id)
        if not category:
            return None

        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(category, key, value.strip() if key == "name" else value)
        await self.session.commit()
        await self.session.refresh(category)
        return category

    async def delete(self, category_id: UUID) -> bool:
        """Delete a category. Its articles become uncategorized."""
        category = await self.get(category_id)
        if not category:
            return False

        await self.session.execute(
            update(Article)
            .where(Article.category_id == category_id)
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.session.delete(category)
        await self.session.commit()
        return True
