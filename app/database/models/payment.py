"""Payment bookkeeping - idempotency ledger and failed reconciliation audit log."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.models.model_base import SqlAlchemyModel, TimestampMixin
from app.database.session import Base


class ProcessedPayment(TimestampMixin, Base):
    """A gateway payment that has already been applied to a membership."""

    __tablename__ = "processed_payments"

    payment_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Optional[int]] = mapped_column(Integer)
    currency: Mapped[Optional[str]] = mapped_column(String(3))

    def __repr__(self) -> str:
        return f"<ProcessedPayment payment_id={self.payment_id} user={self.user_id}>"


class ReconciliationFailure(SqlAlchemyModel):
    """A webhook notification that was acknowledged but could not be applied."""

    __tablename__ = "reconciliation_failures"

    payment_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    topic: Mapped[str] = mapped_column(String(30), nullable=False, default="payment")
    external_reference: Mapped[Optional[str]] = mapped_column(String(128))
    error: Mapped[str] = mapped_column(Text, nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<ReconciliationFailure id={self.id} payment_id={self.payment_id} resolved={self.resolved}>"
