"""
Admin Router - user management, memberships, service verification, payments audit.

All endpoints require get_current_admin (users.is_admin).
"""

import logging

from fastapi import APIRouter, Depends, Path, Query

from app.api.dependencies import get_membership_service, get_user_deletion_service
from app.api.responses import ok, paginated
from app.api.schemas.payment import ReconciliationFailureOut, RetryOut
from app.api.schemas.service import ServiceOut, VerificationUpdate
from app.api.schemas.user import (
    AdminUserUpdate,
    MembershipUpdate,
    SetAdminRequest,
    SetStatusRequest,
    UserDeletionOut,
    UserOut,
    UserStatsSummary,
)
from app.core.auth import CurrentUser, get_current_admin, get_identity_provider
from app.core.identity import IdentityProvider
from app.core.pagination import PageParams
from app.core.services.membership_service import MembershipService
from app.core.services.service_provider_service import ServiceProviderService
from app.core.services.user_deletion_service import UserDeletionService
from app.core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Users ──

@router.get("/users")
async def list_users(
    params: PageParams = Depends(),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
):
    users, total = await service.list_users(params)
    return paginated([UserOut.from_model(u) for u in users], total, params)


@router.get("/users/stats")
async def user_stats(
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
):
    return ok(UserStatsSummary(**await service.stats()))


@router.get("/users/{uid}")
async def get_user(
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
):
    return ok(UserOut.from_model(await service.get_user(uid)))


@router.put("/users/{uid}")
async def update_user(
    data: AdminUserUpdate,
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    user = await service.admin_update(uid, data, identity)
    return ok(UserOut.from_model(user))


@router.post("/users/{uid}/set-admin")
async def set_admin(
    data: SetAdminRequest,
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    user = await service.set_admin(uid, data.is_admin, identity)
    return ok(UserOut.from_model(user))


@router.post("/users/{uid}/set-status")
async def set_status(
    data: SetStatusRequest,
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Enable/disable an account. ``users.disabled`` is what every request checks."""
    user = await service.set_status(uid, data.disabled, identity)
    return ok(UserOut.from_model(user))


@router.put("/users/{uid}/membership")
async def update_membership(
    data: MembershipUpdate,
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: UserService = Depends(UserService.instance),
):
    user = await service.update_membership(uid, data)
    return ok(UserOut.from_model(user))


@router.delete("/users/{uid}")
async def delete_user(
    uid: str = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    deletion: UserDeletionService = Depends(get_user_deletion_service),
):
    """Delete a user with their ratings, articles and services. Safe to re-issue."""
    record = await deletion.delete_user(uid, requested_by=admin.uid)
    return ok(UserDeletionOut(
        uid=record.user_id,
        status=record.status,
        completed_steps=list(record.completed_steps or []),
        last_error=record.last_error,
    ))


# ── Memberships ──

@router.post("/memberships/expire-sweep")
async def run_expiry_sweep(
    admin: CurrentUser = Depends(get_current_admin),
    membership: MembershipService = Depends(get_membership_service),
):
    """Run the expiry sweep now (the scheduled job does the same)."""
    expired = await membership.expire_lapsed()
    return ok({"expired": expired})


# ── Services ──

@router.post("/services/{service_id}/verification")
async def set_service_verification(
    data: VerificationUpdate,
    service_id: int = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    provider = await service.set_verification(service_id, admin.uid, data.status)
    return ok(ServiceOut.from_model(provider))


# ── Payments audit ──

@router.get("/reconciliation-failures")
async def list_reconciliation_failures(
    include_resolved: bool = Query(False, alias="includeResolved"),
    admin: CurrentUser = Depends(get_current_admin),
    membership: MembershipService = Depends(get_membership_service),
):
    failures = await membership.list_failures(include_resolved=include_resolved)
    return ok([ReconciliationFailureOut.from_model(f) for f in failures])


@router.post("/reconciliation-failures/{failure_id}/retry")
async def retry_reconciliation_failure(
    failure_id: int = Path(...),
    admin: CurrentUser = Depends(get_current_admin),
    membership: MembershipService = Depends(get_membership_service),
):
    failure, outcome = await membership.retry_failure(failure_id)
    logger.info(f"Reconciliation failure {failure_id} retried by {admin.uid}: {outcome}")
    return ok(RetryOut(failure=ReconciliationFailureOut.from_model(failure), outcome=outcome))
