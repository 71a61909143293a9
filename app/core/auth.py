"""
Authentication dependencies for FastAPI.

Verifies Firebase ID tokens through the identity provider on ``app.state`` and
loads (or creates) the caller's profile row.

- ``get_identity``: token -> Identity, nothing else
- ``get_current_user``: Identity + profile; disabled accounts are refused here,
  so every authenticated endpoint enforces the flag the same way
- ``get_current_admin``: ``users.is_admin`` required
- ``require_active_membership``: Access Guard on a freshly read profile
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access_guard import evaluate_membership
from app.core.exceptions import ApiError, ErrorCode
from app.core.identity import Identity, IdentityProvider, InvalidTokenError
from app.core.services.user_service import UserService
from app.database.models.user import User
from app.database.repositories.user_repository import UserRepository
from app.database.session import get_db
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

DEV_USER_HEADER = "X-Dev-User"


@dataclass
class CurrentUser:
    """Authenticated caller: verified token claims plus the profile row."""
    identity: Identity
    profile: User

    @property
    def uid(self) -> str:
        return self.identity.uid

    @property
    def email(self) -> Optional[str]:
        return self.identity.email or self.profile.email or None

    @property
    def is_admin(self) -> bool:
        return self.profile.is_admin


def get_identity_provider(request: Request) -> IdentityProvider:
    identity = getattr(request.app.state, "identity", None)
    if identity is None:
        raise ApiError(503, ErrorCode.SERVICE_UNAVAILABLE, "Authentication service not available")
    return identity


async def verify_token(provider: IdentityProvider, token: str) -> Identity:
    try:
        return await run_in_threadpool(provider.verify_token, token)
    except InvalidTokenError as e:
        raise ApiError(401, ErrorCode.INVALID_TOKEN, str(e) or "Invalid token") from e


async def get_identity(
    request: Request,
    cred: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Resolve the caller's identity from the bearer token.

    In dev mode (AUTH_DEV_MODE=true) a request without token may name its uid
    in the X-Dev-User header.
    """
    settings = request.app.state.settings
    if settings.auth_dev_mode and cred is None:
        dev_uid = (request.headers.get(DEV_USER_HEADER) or "").strip()
        if dev_uid:
            return Identity(
                uid=dev_uid,
                email=request.headers.get("X-Dev-User-Email") or f"{dev_uid}@dev.local",
                name="Developer",
                email_verified=True,
            )

    if cred is None:
        raise ApiError.unauthorized("No token provided")

    return await verify_token(get_identity_provider(request), cred.credentials)


async def get_current_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    profile = await UserService(db).get_or_create_profile(identity)
    if profile.disabled:
        raise ApiError.forbidden("This account has been disabled", ErrorCode.ACCOUNT_DISABLED)
    return CurrentUser(identity=identity, profile=profile)


async def get_current_admin(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Dependency that requires the admin flag."""
    if not user.is_admin:
        raise ApiError.forbidden("Admin access required")
    return user


async def require_active_membership(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Membership-gated operations. A storage failure denies; it never lets the call through."""
    try:
        record = await UserRepository(db).get_fresh(user.uid)
    except SQLAlchemyError as e:
        logger.error(f"Membership lookup failed for {user.uid}: {e}")
        raise ApiError.internal("Could not verify membership status") from e

    evaluate_membership(record, utcnow()).raise_for_denial()
    return CurrentUser(identity=user.identity, profile=record)
