"""Checkout and reconciliation audit schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.api.schemas.common import ApiModel
from app.database.models.payment import ReconciliationFailure


class CheckoutOut(ApiModel):
    id: str
    init_point: str = Field(..., alias="init_point")


class ReconciliationFailureOut(ApiModel):
    id: int
    payment_id: str
    topic: str
    external_reference: Optional[str] = None
    error: str
    attempts: int
    resolved: bool
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, failure: ReconciliationFailure) -> "ReconciliationFailureOut":
        return cls(
            id=failure.id,
            payment_id=failure.payment_id,
            topic=failure.topic,
            external_reference=failure.external_reference,
            error=failure.error,
            attempts=failure.attempts,
            resolved=failure.resolved,
            resolved_at=failure.resolved_at,
            created_at=failure.created_at,
            updated_at=failure.updated_at,
        )


class RetryOut(ApiModel):
    failure: ReconciliationFailureOut
    outcome: str
