"""ServiceProvider model - a service listing with admin-driven verification."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import JSONType, SqlAlchemyModel
from app.utils.enums import VerificationStatus


class ServiceProvider(SqlAlchemyModel):
    __tablename__ = "service_providers"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    business_name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    contact_phone: Mapped[Optional[str]] = mapped_column(String(30))
    contact_email: Mapped[Optional[str]] = mapped_column(String(255))
    contact_whatsapp: Mapped[Optional[str]] = mapped_column(String(30))

    verification_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VerificationStatus.PENDING,
        index=True,
    )
    verified_by: Mapped[Optional[str]] = mapped_column(String(128))
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    images: Mapped[List[str]] = mapped_column(JSONType, default=list, nullable=False)

    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    ratings_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    recommendations: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ServiceProvider id={self.id} name={self.business_name}>"
