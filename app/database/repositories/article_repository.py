"""
Article Repository

Listing queries with marketplace filters, counters and per-seller cleanup.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.article import Article
from app.database.repositories.repository import BaseRepository
from app.utils.enums import ArticleStatus


@dataclass
class ArticleFilters:
    category: Optional[str] = None
    condition: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    seller_id: Optional[str] = None
    status: str = ArticleStatus.ACTIVE


class ArticleRepository(BaseRepository[Article]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Article)

    async def search(
        self,
        filters: ArticleFilters,
        offset: int,
        limit: int,
    ) -> Tuple[List[Article], int]:
        """Newest-first page of articles matching every given filter."""
        clauses = [Article.status == filters.status]
        if filters.category:
            clauses.append(Article.category == filters.category)
        if filters.condition:
            clauses.append(Article.condition == filters.condition)
        if filters.min_price is not None:
            clauses.append(Article.price >= filters.min_price)
        if filters.max_price is not None:
            clauses.append(Article.price <= filters.max_price)
        if filters.seller_id:
            clauses.append(Article.seller_id == filters.seller_id)

        query = select(Article).where(*clauses).order_by(Article.created_at.desc(), Article.id.desc())
        return await self.paginate(query, offset=offset, limit=limit)

    async def by_seller(self, seller_id: str) -> Sequence[Article]:
        return await self.all(
            select(Article)
            .where(Article.seller_id == seller_id)
            .order_by(Article.created_at.desc(), Article.id.desc())
        )

    async def increment_views(self, article_id: int) -> bool:
        result = await self.session.execute(
            update(Article)
            .where(Article.id == article_id)
            .values(views=Article.views + 1)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    async def delete_by_seller(self, seller_id: str) -> int:
        result = await self.session.execute(
            delete(Article)
            .where(Article.seller_id == seller_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
