"""User model - profile keyed by the Firebase uid, with the embedded membership record."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import TimestampMixin
from app.database.session import Base
from app.utils.enums import MembershipPlan, MembershipStatus


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    display_name: Mapped[Optional[str]] = mapped_column(String(255))
    photo_url: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(String(30))

    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ── membership ──
    membership_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MembershipStatus.PENDING,
        index=True,
    )
    membership_plan: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MembershipPlan.ANNUAL,
    )
    membership_expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    membership_started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    membership_auto_renew: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ── stats ──
    articles_published: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_sales: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    ratings_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    recommendations: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} membership={self.membership_status}>"
