"""
Rating Repository
"""

from typing import Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.rating import Rating
from app.database.repositories.repository import BaseRepository


class RatingRepository(BaseRepository[Rating]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Rating)

    async def for_target(self, target_type: str, target_id: str) -> Sequence[Rating]:
        return await self.all(
            select(Rating)
            .where(Rating.target_type == target_type, Rating.target_id == target_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
        )

    async def exists(self, reviewer_id: str, target_type: str, target_id: str) -> bool:
        result = await self.session.execute(
            select(Rating.id).where(
                Rating.reviewer_id == reviewer_id,
                Rating.target_type == target_type,
                Rating.target_id == target_id,
            )
        )
        return result.first() is not None

    async def delete_received_by(self, owner_id: str) -> int:
        """Drop ratings about a user or about any of that user's services."""
        result = await self.session.execute(
            delete(Rating)
            .where(or_(Rating.target_owner_id == owner_id, Rating.target_id == owner_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
