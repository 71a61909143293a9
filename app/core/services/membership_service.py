"""
Membership Service - checkout creation and payment reconciliation.

Reconciliation runs in its own transaction (not the request's) so a failure can
be written to the ``reconciliation_failures`` audit log and the gateway still
gets its acknowledgement. Each approved payment is applied at most once: the
``processed_payments`` row is inserted in the same transaction as the
membership update, and its primary key rejects concurrent replays.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import ApiError, ErrorCode
from app.database.models.payment import ProcessedPayment, ReconciliationFailure
from app.database.models.user import User
from app.database.repositories.user_repository import UserRepository
from app.database.session import Database
from app.payments.base import CheckoutResult, PaymentGatewayError, PaymentProvider, PaymentStatus
from app.utils.enums import MembershipPlan, MembershipStatus
from app.utils.time_utils import MEMBERSHIP_PERIOD, utcnow

logger = logging.getLogger(__name__)

PAYMENT_TOPIC = "payment"


class ReconcileOutcome:
    IGNORED_TOPIC = "ignored_topic"
    MISSING_ID = "missing_id"
    NOT_APPROVED = "not_approved"
    UNATTRIBUTED = "unattributed"
    ACTIVATED = "activated"
    DUPLICATE = "duplicate"
    FAILED = "failed"


class UnknownReferenceError(Exception):
    """The payment's external reference matches no user profile."""


def activate_membership(user: User, now: datetime) -> None:
    """``* -> active`` for one annual period starting now."""
    user.membership_status = MembershipStatus.ACTIVE
    user.membership_plan = MembershipPlan.ANNUAL
    user.membership_started_at = now
    user.membership_expires_at = now + MEMBERSHIP_PERIOD


class MembershipService:

    def __init__(self, database: Database, provider: PaymentProvider):
        self.database = database
        self.provider = provider

    async def create_checkout(self, uid: Optional[str], email: Optional[str]) -> CheckoutResult:
        if not uid or not email:
            raise ApiError.validation("User id and email are required to create a payment")
        try:
            return await run_in_threadpool(self.provider.create_checkout, uid, email)
        except PaymentGatewayError as e:
            logger.error(f"Checkout creation failed for {uid}: {e}")
            raise ApiError(500, ErrorCode.PAYMENT_ERROR, "Could not create payment") from e

    async def reconcile(self, topic: Optional[str], payment_id: Optional[str]) -> str:
        """
        Apply a gateway notification. Never raises: anything that goes wrong
        after the topic/id checks is logged and written to the audit log.
        """
        if topic != PAYMENT_TOPIC:
            logger.info(f"Webhook ignored: topic '{topic}'")
            return ReconcileOutcome.IGNORED_TOPIC
        if not payment_id:
            logger.warning("Webhook ignored: payment notification without id")
            return ReconcileOutcome.MISSING_ID

        payment_id = str(payment_id)
        reference = None
        try:
            if await self._already_processed(payment_id):
                logger.info(f"Payment {payment_id} already applied, skipping")
                return ReconcileOutcome.DUPLICATE

            payment = await run_in_threadpool(self.provider.get_payment, payment_id)
            if not payment.approved:
                logger.info(f"Payment {payment_id} is '{payment.status}', nothing to apply")
                return ReconcileOutcome.NOT_APPROVED

            reference = payment.external_reference
            if not reference:
                logger.warning(f"Payment {payment_id} approved without external reference")
                return ReconcileOutcome.UNATTRIBUTED

            return await self._apply(payment_id, payment, reference)
        except Exception as e:
            logger.error(f"Reconciliation of payment {payment_id} failed: {e}")
            await self.record_failure(payment_id, topic, reference, str(e) or e.__class__.__name__)
            return ReconcileOutcome.FAILED

    async def _already_processed(self, payment_id: str) -> bool:
        async with self.database.session() as session:
            return await session.get(ProcessedPayment, payment_id) is not None

    async def _apply(self, payment_id: str, payment: PaymentStatus, reference: str) -> str:
        now = utcnow()
        try:
            async with self.database.session() as session:
                if await session.get(ProcessedPayment, payment_id) is not None:
                    return ReconcileOutcome.DUPLICATE

                user = await UserRepository(session).get_by_id(reference, for_update=True)
                if user is None:
                    raise UnknownReferenceError(f"No user profile for external reference '{reference}'")

                activate_membership(user, now)
                session.add(ProcessedPayment(
                    payment_id=payment_id,
                    user_id=user.id,
                    provider=self.provider.get_name(),
                    status=payment.status,
                    amount=payment.amount,
                    currency=payment.currency,
                ))
        except IntegrityError:
            logger.info(f"Payment {payment_id} applied by a concurrent notification")
            return ReconcileOutcome.DUPLICATE

        logger.info(f"Membership of {reference} activated by payment {payment_id}")
        return ReconcileOutcome.ACTIVATED

    async def record_failure(
        self,
        payment_id: str,
        topic: str,
        external_reference: Optional[str],
        error: str,
    ) -> None:
        """Upsert the open audit entry for this payment id."""
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(ReconciliationFailure).where(
                        ReconciliationFailure.payment_id == payment_id,
                        ReconciliationFailure.resolved.is_(False),
                    )
                )
                failure = result.scalars().first()
                if failure is None:
                    session.add(ReconciliationFailure(
                        payment_id=payment_id,
                        topic=topic,
                        external_reference=external_reference,
                        error=error,
                        attempts=1,
                    ))
                else:
                    failure.attempts += 1
                    failure.error = error
                    if external_reference:
                        failure.external_reference = external_reference
        except SQLAlchemyError:
            logger.exception(f"Could not record reconciliation failure for payment {payment_id}")

    async def list_failures(self, include_resolved: bool = False) -> List[ReconciliationFailure]:
        async with self.database.session() as session:
            query = select(ReconciliationFailure)
            if not include_resolved:
                query = query.where(ReconciliationFailure.resolved.is_(False))
            result = await session.execute(query.order_by(ReconciliationFailure.created_at.desc()))
            return list(result.scalars().all())

    async def retry_failure(self, failure_id: int) -> Tuple[ReconciliationFailure, str]:
        """Re-run reconciliation for an audited payment; resolve it once applied."""
        async with self.database.session() as session:
            failure = await session.get(ReconciliationFailure, failure_id)
            if failure is None:
                raise ApiError.not_found("Reconciliation failure not found")
            if failure.resolved:
                return failure, ReconcileOutcome.DUPLICATE
            payment_id, topic = failure.payment_id, failure.topic

        outcome = await self.reconcile(topic, payment_id)

        async with self.database.session() as session:
            failure = await session.get(ReconciliationFailure, failure_id)
            if outcome in (ReconcileOutcome.ACTIVATED, ReconcileOutcome.DUPLICATE):
                failure.resolved = True
                failure.resolved_at = utcnow()
                logger.info(f"Reconciliation failure {failure_id} resolved ({outcome})")
        return failure, outcome

    async def expire_lapsed(self) -> int:
        """Write ``expired`` on active memberships past their expiry."""
        async with self.database.session() as session:
            count = await UserRepository(session).expire_lapsed(utcnow())
        if count:
            logger.info(f"Membership sweep: {count} membership(s) expired")
        return count
