"""
Category Repository

Taxonomy queries ordered by the admin-defined sort key.
"""

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.category import Category
from app.database.repositories.repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Category)

    async def list_active(self, type: Optional[str] = None) -> Sequence[Category]:
        query = select(Category).where(Category.is_active.is_(True))
        if type:
            query = query.where(Category.type == type)
        return await self.all(query.order_by(Category.sort_order.asc(), Category.id))

    async def list_all(self) -> Sequence[Category]:
        return await self.all(
            select(Category).order_by(Category.type, Category.sort_order.asc(), Category.id)
        )

    async def max_order(self, type: str) -> int:
        result = await self.session.execute(
            select(func.max(Category.sort_order)).where(Category.type == type)
        )
        return result.scalar_one_or_none() or 0

    async def get_many(self, ids: Sequence[int]) -> Sequence[Category]:
        return await self.all(select(Category).where(Category.id.in_(ids)))
