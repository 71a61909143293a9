"""Service provider listing schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, StrictBool, field_validator, model_validator

from app.api.schemas.common import ApiModel
from app.database.models.service_provider import ServiceProvider

MAX_SERVICE_IMAGES = 5

VerificationValue = Literal["pending", "verified", "rejected"]


class ServiceContact(ApiModel):
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    whatsapp: Optional[str] = Field(None, max_length=30)

    @model_validator(mode="after")
    def require_one_channel(self):
        if not (self.phone or self.email or self.whatsapp):
            raise ValueError("At least one contact method is required")
        return self


class ServiceCreate(ApiModel):
    business_name: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(..., min_length=1, max_length=50)
    contact: ServiceContact
    images: List[str] = Field(default_factory=list, max_length=MAX_SERVICE_IMAGES)


class ServiceUpdate(ApiModel):
    business_name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    contact: Optional[ServiceContact] = None
    images: Optional[List[str]] = None

    @field_validator("images")
    @classmethod
    def limit_images(cls, images):
        if images is not None and len(images) > MAX_SERVICE_IMAGES:
            raise ValueError(f"At most {MAX_SERVICE_IMAGES} images are allowed")
        return images


class ServiceActiveUpdate(ApiModel):
    is_active: StrictBool


class VerificationUpdate(ApiModel):
    status: VerificationValue


class VerificationOut(ApiModel):
    status: str
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None


class ServiceContactOut(ApiModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp: Optional[str] = None


class ServiceOut(ApiModel):
    id: int
    user_id: str
    business_name: str
    description: str
    category: str
    contact: ServiceContactOut
    verification: VerificationOut
    images: List[str]
    average_rating: float
    ratings_count: int
    recommendations: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, service: ServiceProvider) -> "ServiceOut":
        return cls(
            id=service.id,
            user_id=service.user_id,
            business_name=service.business_name,
            description=service.description,
            category=service.category,
            contact=ServiceContactOut(
                phone=service.contact_phone,
                email=service.contact_email,
                whatsapp=service.contact_whatsapp,
            ),
            verification=VerificationOut(
                status=service.verification_status,
                verified_by=service.verified_by,
                verified_at=service.verified_at,
            ),
            images=list(service.images or []),
            average_rating=service.average_rating,
            ratings_count=service.ratings_count,
            recommendations=service.recommendations,
            is_active=service.is_active,
            created_at=service.created_at,
            updated_at=service.updated_at,
        )
