"""Category Service - admin-managed taxonomy for articles and services."""

import logging
from typing import List, Optional, Sequence

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.category import CategoryCreate, CategoryUpdate
from app.core.exceptions import ApiError
from app.database.models.category import Category
from app.database.repositories.category_repository import CategoryRepository
from app.database.session import get_db
from app.utils.enums import CategoryType

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = {
    CategoryType.ARTICLE: [
        {"name": "Uniformes", "slug": "uniformes", "icon": "👕", "color": "bg-blue-100"},
        {"name": "Libros", "slug": "libros", "icon": "📚", "color": "bg-green-100"},
        {"name": "Útiles Escolares", "slug": "utiles", "icon": "✏️", "color": "bg-yellow-100"},
        {"name": "Deportes", "slug": "deportes", "icon": "⚽", "color": "bg-red-100"},
        {"name": "Tecnología", "slug": "tecnologia", "icon": "💻", "color": "bg-purple-100"},
        {"name": "Otros", "slug": "otros", "icon": "📦", "color": "bg-gray-100"},
    ],
    CategoryType.SERVICE: [
        {"name": "Clases Particulares", "slug": "tutoring", "icon": "📖", "color": "bg-indigo-100"},
        {"name": "Transporte Escolar", "slug": "transport", "icon": "🚐", "color": "bg-orange-100"},
        {"name": "Colaciones/Almuerzos", "slug": "catering", "icon": "🍱", "color": "bg-amber-100"},
        {"name": "Eventos/Cumpleaños", "slug": "events", "icon": "🎉", "color": "bg-pink-100"},
        {"name": "Reparaciones", "slug": "repairs", "icon": "🔧", "color": "bg-slate-100"},
        {"name": "Otros Servicios", "slug": "other", "icon": "🛠️", "color": "bg-gray-100"},
    ],
}


class CategoryService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = CategoryRepository(session)

    @staticmethod
    def instance(session=Depends(get_db)):
        return CategoryService(session)

    async def list_categories(self, type: Optional[str] = None) -> Sequence[Category]:
        return await self.repo.list_active(type)

    async def list_all(self) -> Sequence[Category]:
        return await self.repo.list_all()

    async def get_category(self, category_id: int) -> Category:
        category = await self.repo.get_by_id(category_id)
        if category is None:
            raise ApiError.not_found("Category not found")
        return category

    async def create_category(self, data: CategoryCreate) -> Category:
        order = data.order
        if order is None:
            order = await self.repo.max_order(data.type) + 1
        try:
            category = await self.repo.create(
                name=data.name,
                slug=data.slug,
                icon=data.icon,
                color=data.color,
                type=data.type,
                sort_order=order,
                is_active=data.is_active,
            )
        except IntegrityError as e:
            raise ApiError.conflict(
                f"A {data.type} category with slug '{data.slug}' already exists"
            ) from e
        logger.info(f"Category {category.type}/{category.slug} created")
        return category

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.get_category(category_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "order" in changes:
            changes["sort_order"] = changes.pop("order")
        try:
            return await self.repo.update(category, **changes)
        except IntegrityError as e:
            raise ApiError.conflict(
                f"A {category.type} category with slug '{changes.get('slug')}' already exists"
            ) from e

    async def delete_category(self, category_id: int) -> Category:
        """Soft delete."""
        category = await self.get_category(category_id)
        return await self.repo.update(category, is_active=False)

    async def reorder(self, category_ids: List[int]) -> None:
        categories = {c.id: c for c in await self.repo.get_many(category_ids)}
        missing = [cid for cid in category_ids if cid not in categories]
        if missing:
            raise ApiError.not_found(f"Categories not found: {missing}")
        for index, category_id in enumerate(category_ids):
            categories[category_id].sort_order = index + 1
        await self.session.flush()

    async def seed_defaults(self) -> int:
        """Insert the default taxonomy into an empty table. Returns rows created."""
        if await self.repo.count() > 0:
            logger.info("Categories already exist, skipping seed")
            return 0

        created = 0
        for category_type, entries in DEFAULT_CATEGORIES.items():
            for index, entry in enumerate(entries):
                self.session.add(Category(type=category_type, sort_order=index + 1, is_active=True, **entry))
                created += 1
        await self.session.flush()
        logger.info(f"Seeded {created} default categories")
        return created
