"""
Auth Router - token verification and the caller's own profile.

Endpoints:
- POST /api/auth/verify-token - Verify an ID token, return its subject
- GET  /api/auth/me           - Profile, membership and current access decision
- PUT  /api/auth/me           - Update display name, photo, phone
"""

import logging

from fastapi import APIRouter, Depends

from app.api.responses import ok
from app.api.schemas.user import MeOut, ProfileUpdate, VerifyTokenOut, VerifyTokenRequest
from app.core.access_guard import evaluate_membership
from app.core.auth import CurrentUser, get_current_user, get_identity_provider, verify_token
from app.core.identity import IdentityProvider
from app.core.services.user_service import UserService
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/verify-token")
async def verify_id_token(
    data: VerifyTokenRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    identity = await verify_token(provider, data.token)
    return ok(VerifyTokenOut(
        uid=identity.uid,
        email=identity.email,
        email_verified=identity.email_verified,
    ))


@router.get("/me")
async def get_profile(current_user: CurrentUser = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    profile = current_user.profile
    return ok(MeOut.build(profile, evaluate_membership(profile, utcnow())))


@router.put("/me")
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(UserService.instance),
):
    profile = await service.update_profile(current_user.profile, data)
    logger.info(f"Profile updated: {current_user.uid}")
    return ok(MeOut.build(profile, evaluate_membership(profile, utcnow())))
