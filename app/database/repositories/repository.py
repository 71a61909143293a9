"""
Repository Pattern Base Classes

Async database abstraction layer for the marketplace.

The Repository Pattern:
1. Decouples business logic from SQLAlchemy queries
2. Makes services testable against any AsyncSession
3. Centralizes common queries

Architecture:
- BaseRepository: Generic CRUD operations for any model
- Specialized repositories: Domain-specific queries (ArticleRepository, RatingRepository, ...)

Repositories flush but never commit: the caller owns the transaction
(``get_db`` for request handlers, ``Database.session()`` elsewhere).
"""

from abc import ABC
from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.session import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """
    Abstract base repository with common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class (Article, Category, etc.)

    Example:
        class CategoryRepository(BaseRepository[Category]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, Category)
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: Any, for_update: bool = False) -> Optional[ModelType]:
        """
        Retrieve a single record by primary key.

        Args:
            id: Primary key value
            for_update: Lock the row until the transaction ends

        Returns:
            Model instance or None if not found
        """
        pk = self.model.__mapper__.primary_key[0]
        query = select(self.model).where(pk == id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> ModelType:
        """
        Create a new record and flush it so generated keys are populated.

        Args:
            **kwargs: Column values for the new record

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def update(self, instance: ModelType, **kwargs) -> ModelType:
        """Set the given attributes and flush."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()

    async def paginate(
        self,
        query: Select,
        offset: int,
        limit: int,
    ) -> Tuple[List[ModelType], int]:
        """
        Run ``query`` for one page and count the full result.

        Args:
            query: A select() of this repository's model, already filtered and ordered
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            (items, total)
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_query)).scalar_one() or 0
        result = await self.session.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all()), total

    async def all(self, query: Select) -> Sequence[ModelType]:
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one() or 0
