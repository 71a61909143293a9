"""Service Provider Service - service listings and admin verification."""

import logging
from typing import List, Optional, Sequence, Tuple

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas.service import ServiceContact, ServiceCreate, ServiceUpdate
from app.core.exceptions import ApiError
from app.core.pagination import PageParams
from app.database.models.service_provider import ServiceProvider
from app.database.repositories.service_provider_repository import ServiceProviderRepository
from app.database.session import get_db
from app.utils.enums import VerificationStatus
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def _contact_columns(contact: ServiceContact) -> dict:
    return {
        "contact_phone": contact.phone,
        "contact_email": contact.email,
        "contact_whatsapp": contact.whatsapp,
    }


class ServiceProviderService:
    def __init__(self, session: AsyncSession):
        self.repo = ServiceProviderRepository(session)

    @staticmethod
    def instance(session=Depends(get_db)):
        return ServiceProviderService(session)

    async def list_services(
        self,
        params: PageParams,
        category: Optional[str] = None,
        verified_only: bool = False,
    ) -> Tuple[List[ServiceProvider], int]:
        raw = params.to_raw_params()
        return await self.repo.search(
            offset=raw.offset,
            limit=raw.limit,
            category=category,
            verified_only=verified_only,
        )

    async def my_services(self, user_id: str) -> Sequence[ServiceProvider]:
        return await self.repo.by_owner(user_id)

    async def get_service(self, service_id: int) -> ServiceProvider:
        service = await self.repo.get_by_id(service_id)
        if service is None:
            raise ApiError.not_found("Service not found")
        return service

    async def create_service(self, user_id: str, data: ServiceCreate) -> ServiceProvider:
        service = await self.repo.create(
            user_id=user_id,
            business_name=data.business_name,
            description=data.description,
            category=data.category,
            images=data.images,
            verification_status=VerificationStatus.PENDING,
            is_active=True,
            **_contact_columns(data.contact),
        )
        logger.info(f"Service {service.id} created by {user_id}")
        return service

    async def _owned(self, service_id: int, user_id: str) -> ServiceProvider:
        service = await self.get_service(service_id)
        if service.user_id != user_id:
            raise ApiError.forbidden("You can only modify your own services")
        return service

    async def update_service(self, service_id: int, user_id: str, data: ServiceUpdate) -> ServiceProvider:
        service = await self._owned(service_id, user_id)
        changes = data.model_dump(exclude_unset=True, exclude={"contact"})
        if data.contact is not None:
            changes.update(_contact_columns(data.contact))
        for key in ("business_name", "description", "category", "images"):
            if key in changes and changes[key] is None:
                raise ApiError.validation(f"{key} cannot be null")
        return await self.repo.update(service, **changes)

    async def set_active(self, service_id: int, user_id: str, is_active: bool) -> ServiceProvider:
        service = await self._owned(service_id, user_id)
        return await self.repo.update(service, is_active=is_active)

    async def set_verification(self, service_id: int, admin_id: str, status: str) -> ServiceProvider:
        service = await self.get_service(service_id)
        if status == VerificationStatus.PENDING:
            changes = {"verified_by": None, "verified_at": None}
        else:
            changes = {"verified_by": admin_id, "verified_at": utcnow()}
        logger.info(f"Service {service_id} verification set to {status} by {admin_id}")
        return await self.repo.update(service, verification_status=status, **changes)
