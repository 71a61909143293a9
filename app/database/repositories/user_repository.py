"""
User Repository

Profile lookups, membership updates and admin aggregates.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models.user import User
from app.database.repositories.repository import BaseRepository
from app.utils.enums import MembershipStatus


class UserRepository(BaseRepository[User]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_fresh(self, uid: str) -> Optional[User]:
        """Re-read the row even if the session already holds it."""
        result = await self.session.execute(
            select(User).where(User.id == uid).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_users(self, offset: int, limit: int) -> Tuple[List[User], int]:
        query = select(User).order_by(User.created_at.desc(), User.id)
        return await self.paginate(query, offset=offset, limit=limit)

    async def increment_stat(self, uid: str, column: str, amount: int = 1) -> None:
        """Atomic ``column = max(column + amount, 0)`` on one profile."""
        new_value = getattr(User, column) + amount
        if amount < 0:
            new_value = case((new_value < 0, 0), else_=new_value)
        await self.session.execute(
            update(User)
            .where(User.id == uid)
            .values({column: new_value})
            .execution_options(synchronize_session=False)
        )

    async def expire_lapsed(self, now: datetime) -> int:
        result = await self.session.execute(
            update(User)
            .where(
                User.membership_status == MembershipStatus.ACTIVE,
                User.membership_expires_at <= now,
            )
            .values(membership_status=MembershipStatus.EXPIRED, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def stats(self) -> dict:
        row = (await self.session.execute(
            select(
                func.count(User.id),
                func.sum(case((User.disabled.is_(True), 1), else_=0)),
                func.sum(case((User.is_admin.is_(True), 1), else_=0)),
            )
        )).one()
        total, disabled, admins = row
        return {
            "total_users": total or 0,
            "active_users": (total or 0) - (disabled or 0),
            "disabled_users": disabled or 0,
            "admin_users": admins or 0,
        }
