"""
User Deletion Service - cascading delete run as a resumable saga.

Dependents go first, then the profile row, then the identity record. Every
step commits on its own and is appended to ``user_deletions.completed_steps``;
re-issuing the delete after a failure resumes at the first step not yet done,
or starts over when the profile row exists again.
"""

import logging
from typing import Awaitable, Callable, List, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ApiError, ErrorCode
from app.core.identity import IdentityProvider
from app.database.models.user import User
from app.database.models.user_deletion import UserDeletion
from app.database.repositories.article_repository import ArticleRepository
from app.database.repositories.rating_repository import RatingRepository
from app.database.repositories.service_provider_repository import ServiceProviderRepository
from app.database.session import Database
from app.utils.enums import DeletionStatus

logger = logging.getLogger(__name__)

Step = Callable[[AsyncSession, str], Awaitable[None]]


class UserDeletionError(Exception):
    """A saga step did not complete."""


class UserDeletionService:

    def __init__(self, database: Database, identity: IdentityProvider):
        self.database = database
        self.identity = identity

    def steps(self) -> List[Tuple[str, Step]]:
        return [
            ("ratings", self._delete_ratings),
            ("articles", self._delete_articles),
            ("services", self._delete_services),
            ("profile", self._delete_profile),
            ("identity", self._delete_identity),
        ]

    async def delete_user(self, uid: str, requested_by: str) -> UserDeletion:
        if uid == requested_by:
            raise ApiError.validation("You cannot delete your own account")

        completed = await self._begin(uid, requested_by)

        for name, step in self.steps():
            if name in completed:
                continue
            try:
                async with self.database.session() as session:
                    await step(session, uid)
                    record = await session.get(UserDeletion, uid)
                    completed = completed + [name]
                    record.completed_steps = completed
            except Exception as e:
                logger.error(f"Deletion of user {uid} failed at step '{name}': {e}")
                await self._mark(uid, DeletionStatus.FAILED, f"{name}: {e}")
                raise ApiError.internal(
                    f"User deletion stopped at step '{name}'; retry to resume"
                ) from e
            logger.info(f"Deletion of user {uid}: step '{name}' done")

        record = await self._mark(uid, DeletionStatus.COMPLETED, None)
        logger.warning(f"User {uid} deleted by {requested_by}")
        return record

    async def _begin(self, uid: str, requested_by: str) -> List[str]:
        """Create or resume the progress record. Returns the steps already done."""
        async with self.database.session() as session:
            record = await session.get(UserDeletion, uid)
            user = await session.get(User, uid)

            if user is not None:
                # profile is back (or never left): every step runs again
                if record is None:
                    record = UserDeletion(user_id=uid)
                    session.add(record)
                record.completed_steps = []
            elif record is None:
                raise ApiError.not_found("User not found", ErrorCode.USER_NOT_FOUND)
            elif record.status == DeletionStatus.COMPLETED:
                return list(record.completed_steps)

            record.status = DeletionStatus.IN_PROGRESS
            record.requested_by = requested_by
            record.last_error = None
            return list(record.completed_steps or [])

    async def _mark(self, uid: str, status: str, error) -> UserDeletion:
        async with self.database.session() as session:
            record = await session.get(UserDeletion, uid)
            record.status = status
            record.last_error = error
            return record

    # ── steps ──

    async def _delete_ratings(self, session: AsyncSession, uid: str) -> None:
        count = await RatingRepository(session).delete_received_by(uid)
        logger.debug(f"{count} ratings removed for {uid}")

    async def _delete_articles(self, session: AsyncSession, uid: str) -> None:
        count = await ArticleRepository(session).delete_by_seller(uid)
        logger.debug(f"{count} articles removed for {uid}")

    async def _delete_services(self, session: AsyncSession, uid: str) -> None:
        count = await ServiceProviderRepository(session).delete_by_owner(uid)
        logger.debug(f"{count} services removed for {uid}")

    async def _delete_profile(self, session: AsyncSession, uid: str) -> None:
        user = await session.get(User, uid)
        if user is not None:
            await session.delete(user)

    async def _delete_identity(self, session: AsyncSession, uid: str) -> None:
        if not await run_in_threadpool(self.identity.delete_user, uid):
            raise UserDeletionError("identity provider did not delete the account")
