"""
User Service - profiles and admin user management.

The ``users`` row is authoritative for ``disabled`` and ``is_admin``; the
identity provider only receives best-effort mirrors of those flags.
"""

import logging
from typing import List, Tuple

from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.user import AdminUserUpdate, MembershipUpdate, ProfileUpdate
from app.core.exceptions import ApiError, ErrorCode
from app.core.identity import Identity, IdentityProvider
from app.core.pagination import PageParams
from app.database.models.user import User
from app.database.repositories.user_repository import UserRepository
from app.database.session import get_db
from app.utils.enums import MembershipPlan, MembershipStatus
from app.utils.time_utils import MEMBERSHIP_PERIOD, utcnow

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = UserRepository(session)

    @staticmethod
    def instance(session=Depends(get_db)):
        return UserService(session)

    async def get_or_create_profile(self, identity: Identity) -> User:
        """
        Load the caller's profile, creating it on first sight.

        A new profile starts with a ``pending`` annual membership whose expiry
        is a placeholder one year out. The insert is committed immediately so
        the profile exists even if the rest of the request fails.
        """
        user = await self.repo.get_by_id(identity.uid)
        if user is not None:
            return user

        now = utcnow()
        user = User(
            id=identity.uid,
            email=identity.email or "",
            display_name=identity.name,
            is_admin=identity.is_admin,
            membership_status=MembershipStatus.PENDING,
            membership_plan=MembershipPlan.ANNUAL,
            membership_expires_at=now + MEMBERSHIP_PERIOD,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # a concurrent first request created it
            await self.session.rollback()
            user = await self.repo.get_by_id(identity.uid)
            if user is None:
                raise
            return user

        logger.info(f"Profile created for {identity.uid} ({identity.email})")
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        return await self.repo.update(user, **data.model_dump(exclude_unset=True))

    # ── admin ──

    async def list_users(self, params: PageParams) -> Tuple[List[User], int]:
        raw = params.to_raw_params()
        return await self.repo.list_users(offset=raw.offset, limit=raw.limit)

    async def get_user(self, uid: str, for_update: bool = False) -> User:
        user = await self.repo.get_by_id(uid, for_update=for_update)
        if user is None:
            raise ApiError.not_found("User not found", ErrorCode.USER_NOT_FOUND)
        return user

    async def stats(self) -> dict:
        return await self.repo.stats()

    async def admin_update(
        self,
        uid: str,
        data: AdminUserUpdate,
        identity: IdentityProvider,
    ) -> User:
        user = await self.get_user(uid)
        changes = data.model_dump(exclude_unset=True)
        if "admin" in changes:
            changes["is_admin"] = changes.pop("admin")
        await self.repo.update(user, **changes)

        if "disabled" in changes:
            await run_in_threadpool(identity.set_disabled, uid, user.disabled)
        if "is_admin" in changes:
            await run_in_threadpool(identity.set_admin_claim, uid, user.is_admin)
        logger.info(f"User {uid} updated by admin: {sorted(changes)}")
        return user

    async def set_status(self, uid: str, disabled: bool, identity: IdentityProvider) -> User:
        user = await self.get_user(uid)
        await self.repo.update(user, disabled=disabled)
        mirrored = await run_in_threadpool(identity.set_disabled, uid, disabled)
        logger.warning(
            f"User {uid} {'disabled' if disabled else 'enabled'}"
            f"{'' if mirrored else ' (identity provider not updated)'}"
        )
        return user

    async def set_admin(self, uid: str, is_admin: bool, identity: IdentityProvider) -> User:
        user = await self.get_user(uid)
        await self.repo.update(user, is_admin=is_admin)
        await run_in_threadpool(identity.set_admin_claim, uid, is_admin)
        logger.warning(f"User {uid} admin flag set to {is_admin}")
        return user

    async def update_membership(self, uid: str, data: MembershipUpdate) -> User:
        """Direct field overwrite, no lifecycle rules beyond type checks."""
        user = await self.get_user(uid, for_update=True)
        fields = data.model_dump(exclude_unset=True)
        for key, value in fields.items():
            if value is None and key != "started_at":
                raise ApiError.validation(f"membership.{key} cannot be null")
        changes = {f"membership_{key}": value for key, value in fields.items()}
        await self.repo.update(user, **changes)
        logger.warning(f"Membership of {uid} edited by admin: {changes}")
        return user
