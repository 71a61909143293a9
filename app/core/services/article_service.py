"""
Article Service - marketplace listings.

Sellers own their listings: every mutation checks ``seller_id`` against the
caller. Seller stats are adjusted with atomic UPDATEs in the same transaction.
"""

import logging
from typing import List, Sequence, Tuple

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.article import ArticleCreate, ArticleUpdate
from app.core.exceptions import ApiError
from app.core.pagination import PageParams
from app.database.models.article import Article
from app.database.repositories.article_repository import ArticleFilters, ArticleRepository
from app.database.repositories.user_repository import UserRepository
from app.database.session import get_db
from app.utils.enums import ArticleStatus

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(self, session: AsyncSession):
        self.repo = ArticleRepository(session)
        self.users = UserRepository(session)

    @staticmethod
    def instance(session=Depends(get_db)):
        return ArticleService(session)

    async def list_articles(
        self,
        filters: ArticleFilters,
        params: PageParams,
    ) -> Tuple[List[Article], int]:
        raw = params.to_raw_params()
        return await self.repo.search(filters, offset=raw.offset, limit=raw.limit)

    async def my_listings(self, seller_id: str) -> Sequence[Article]:
        return await self.repo.by_seller(seller_id)

    async def get_article(self, article_id: int) -> Article:
        """Fetch an article and count the view."""
        if not await self.repo.increment_views(article_id):
            raise ApiError.not_found("Article not found")
        return await self.repo.get_by_id(article_id)

    async def create_article(self, seller_id: str, data: ArticleCreate) -> Article:
        article = await self.repo.create(
            seller_id=seller_id,
            title=data.title,
            description=data.description,
            category=data.category,
            subcategory=data.subcategory,
            condition=data.condition,
            price=data.price,
            price_negotiable=data.price_negotiable,
            extra_metadata=data.metadata.model_dump(exclude_none=True),
            images=data.images,
            status=ArticleStatus.ACTIVE,
        )
        await self.users.increment_stat(seller_id, "articles_published", 1)
        logger.info(f"Article {article.id} created by {seller_id}")
        return article

    async def _owned(self, article_id: int, user_id: str) -> Article:
        article = await self.repo.get_by_id(article_id)
        if article is None:
            raise ApiError.not_found("Article not found")
        if article.seller_id != user_id:
            raise ApiError.forbidden("You can only modify your own articles")
        return article

    async def update_article(self, article_id: int, user_id: str, data: ArticleUpdate) -> Article:
        article = await self._owned(article_id, user_id)
        changes = data.model_dump(exclude_unset=True)
        if "metadata" in changes:
            metadata = changes.pop("metadata")
            changes["extra_metadata"] = {k: v for k, v in (metadata or {}).items() if v is not None}
        for key in ("title", "description", "category", "condition", "price", "price_negotiable", "images"):
            if key in changes and changes[key] is None:
                raise ApiError.validation(f"{key} cannot be null")
        return await self.repo.update(article, **changes)

    async def delete_article(self, article_id: int, user_id: str) -> None:
        article = await self._owned(article_id, user_id)
        await self.repo.delete(article)
        await self.users.increment_stat(user_id, "articles_published", -1)
        logger.info(f"Article {article_id} deleted by {user_id}")

    async def set_status(self, article_id: int, user_id: str, status: str) -> Article:
        article = await self._owned(article_id, user_id)
        if status == ArticleStatus.SOLD and article.status != ArticleStatus.SOLD:
            await self.users.increment_stat(user_id, "total_sales", 1)
        return await self.repo.update(article, status=status)
