"""
ServiceProvider Repository
"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.service_provider import ServiceProvider
from app.database.repositories.repository import BaseRepository
from app.utils.enums import VerificationStatus


class ServiceProviderRepository(BaseRepository[ServiceProvider]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, ServiceProvider)

    async def search(
        self,
        offset: int,
        limit: int,
        category: Optional[str] = None,
        verified_only: bool = False,
    ) -> Tuple[List[ServiceProvider], int]:
        query = select(ServiceProvider).where(ServiceProvider.is_active.is_(True))
        if category:
            query = query.where(ServiceProvider.category == category)
        if verified_only:
            query = query.where(ServiceProvider.verification_status == VerificationStatus.VERIFIED)
        query = query.order_by(ServiceProvider.created_at.desc(), ServiceProvider.id.desc())
        return await self.paginate(query, offset=offset, limit=limit)

    async def by_owner(self, user_id: str) -> Sequence[ServiceProvider]:
        return await self.all(
            select(ServiceProvider)
            .where(ServiceProvider.user_id == user_id)
            .order_by(ServiceProvider.created_at.desc())
        )

    async def delete_by_owner(self, user_id: str) -> int:
        result = await self.session.execute(
            delete(ServiceProvider)
            .where(ServiceProvider.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
