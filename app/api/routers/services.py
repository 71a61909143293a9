"""
Services Router - service provider listings.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from app.api.responses import ok, paginated
from app.api.schemas.service import ServiceActiveUpdate, ServiceCreate, ServiceOut, ServiceUpdate
from app.core.auth import CurrentUser, get_current_user, require_active_membership
from app.core.pagination import PageParams
from app.core.services.service_provider_service import ServiceProviderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_services(
    category: Optional[str] = Query(None),
    verified: bool = Query(False, description="Only verified providers"),
    params: PageParams = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    items, total = await service.list_services(params, category=category, verified_only=verified)
    return paginated([ServiceOut.from_model(s) for s in items], total, params)


@router.get("/mine")
async def my_services(
    current_user: CurrentUser = Depends(get_current_user),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    services = await service.my_services(current_user.uid)
    return ok([ServiceOut.from_model(s) for s in services])


@router.get("/{service_id}")
async def get_service(
    service_id: int = Path(...),
    current_user: CurrentUser = Depends(get_current_user),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    return ok(ServiceOut.from_model(await service.get_service(service_id)))


@router.post("", status_code=201)
async def create_service(
    data: ServiceCreate,
    member: CurrentUser = Depends(require_active_membership),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    """New listings start with verification ``pending``."""
    provider = await service.create_service(member.uid, data)
    return ok(ServiceOut.from_model(provider))


@router.put("/{service_id}")
async def update_service(
    data: ServiceUpdate,
    service_id: int = Path(...),
    member: CurrentUser = Depends(require_active_membership),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    provider = await service.update_service(service_id, member.uid, data)
    return ok(ServiceOut.from_model(provider))


@router.patch("/{service_id}/active")
async def set_service_active(
    data: ServiceActiveUpdate,
    service_id: int = Path(...),
    current_user: CurrentUser = Depends(get_current_user),
    service: ServiceProviderService = Depends(ServiceProviderService.instance),
):
    provider = await service.set_active(service_id, current_user.uid, data.is_active)
    return ok(ServiceOut.from_model(provider))
