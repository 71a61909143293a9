"""
Rating Service - reviews of sellers and service providers.

One rating per (reviewer, target, target type), enforced by a unique
constraint. The target's aggregate is recomputed from its ratings while
the target row is locked, in the same transaction as the insert.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

from fastapi import Depends
from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.rating import RatingCreate
from app.core.exceptions import ApiError, ErrorCode
from app.database.models.rating import Rating
from app.database.models.service_provider import ServiceProvider
from app.database.models.user import User
from app.database.repositories.rating_repository import RatingRepository
from app.database.repositories.service_provider_repository import ServiceProviderRepository
from app.database.repositories.user_repository import UserRepository
from app.database.session import get_db
from app.utils.enums import RatingTargetType

logger = logging.getLogger(__name__)

RatingTarget = Union[User, ServiceProvider]

# service_providers.id is a 32-bit INTEGER column
MAX_SERVICE_ID = 2**31 - 1


def target_key(target_type: str, target_id: str) -> Optional[str]:
    """
    Canonical ``ratings.target_id`` for a target, or None when it cannot name one.

    Service ids are stored as the decimal form of the row id, so "7" and "007"
    share one key.
    """
    if target_type != RatingTargetType.SERVICE:
        return target_id
    if not (target_id.isascii() and target_id.isdigit()):
        return None
    service_id = int(target_id)
    if service_id > MAX_SERVICE_ID:
        return None
    return str(service_id)


class RatingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = RatingRepository(session)
        self.users = UserRepository(session)
        self.services = ServiceProviderRepository(session)

    @staticmethod
    def instance(session=Depends(get_db)):
        return RatingService(session)

    async def list_ratings(self, target_type: str, target_id: str) -> Sequence[Rating]:
        key = target_key(target_type, target_id)
        if key is None:
            return []
        return await self.repo.for_target(target_type, key)

    async def has_rated(self, reviewer_id: str, target_type: str, target_id: str) -> bool:
        key = target_key(target_type, target_id)
        if key is None:
            return False
        return await self.repo.exists(reviewer_id, target_type, key)

    async def _load_target(self, target_type: str, target_id: str) -> Tuple[RatingTarget, str]:
        """Lock the target row. Returns it with its canonical rating key."""
        key = target_key(target_type, target_id)
        target = None
        if key is not None and target_type == RatingTargetType.USER:
            target = await self.users.get_by_id(key, for_update=True)
        elif key is not None:
            target = await self.services.get_by_id(int(key), for_update=True)
        if target is None:
            raise ApiError.not_found(f"Rating target {target_type} '{target_id}' not found")
        return target, key

    async def create_rating(self, reviewer: User, data: RatingCreate) -> Rating:
        target, key = await self._load_target(data.target_type, data.target_id)
        owner_id = target.id if data.target_type == RatingTargetType.USER else target.user_id
        if owner_id == reviewer.id:
            raise ApiError.validation("You cannot rate yourself")

        rating = Rating(
            target_type=data.target_type,
            target_id=key,
            target_owner_id=owner_id,
            reviewer_id=reviewer.id,
            reviewer_name=reviewer.display_name,
            score=data.score,
            comment=data.comment,
            recommend=data.recommend,
        )
        self.session.add(rating)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ApiError.conflict(
                f"You have already rated this {data.target_type}",
                ErrorCode.ALREADY_RATED,
            ) from e

        await self._refresh_aggregate(target, data.target_type, key)
        logger.info(f"Rating {rating.id} by {reviewer.id} on {data.target_type}:{key}")
        return rating

    async def _refresh_aggregate(self, target: RatingTarget, target_type: str, target_id: str) -> None:
        row = (await self.session.execute(
            select(
                func.avg(Rating.score),
                func.count(Rating.id),
                func.sum(case((Rating.recommend.is_(True), 1), else_=0)),
            ).where(Rating.target_type == target_type, Rating.target_id == target_id)
        )).one()
        average, count, recommendations = row
        target.average_rating = round(float(average or 0), 1)
        target.ratings_count = count or 0
        target.recommendations = recommendations or 0
        await self.session.flush()
