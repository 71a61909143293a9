"""
Webhooks Router - payment notifications from the gateway.

Mercado Pago sends either ``?topic=payment&id=123`` (IPN) or
``?type=payment&data.id=123`` with a JSON body ``{"type", "data": {"id"}}``.
Once the signature checks out the notification is always acknowledged with
200; reconciliation problems go to the audit log instead of the response.
"""

import json
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_membership_service
from app.core.exceptions import ApiError, ErrorCode
from app.core.services.membership_service import MembershipService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_notification(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """(topic, payment id) from the query string, falling back to the JSON body."""
    params = request.query_params
    topic = params.get("topic") or params.get("type")
    data_id = params.get("id") or params.get("data.id")
    if topic and data_id:
        return topic, data_id

    raw = await request.body()
    if raw:
        try:
            body = json.loads(raw)
        except ValueError:
            logger.warning("Webhook body is not valid JSON")
            body = None
        if isinstance(body, dict):
            topic = topic or body.get("topic") or body.get("type")
            data = body.get("data")
            if not data_id and isinstance(data, dict) and data.get("id") is not None:
                data_id = str(data["id"])
    return topic, data_id


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    membership: MembershipService = Depends(get_membership_service),
):
    """Receive a payment notification and reconcile the membership."""
    topic, data_id = await _read_notification(request)

    if not membership.provider.verify_webhook(request.headers, data_id):
        raise ApiError(401, ErrorCode.INVALID_SIGNATURE, "Invalid webhook signature")

    outcome = await membership.reconcile(topic, data_id)
    logger.info(f"Webhook topic={topic} id={data_id}: {outcome}")
    return {"success": True, "received": True, "outcome": outcome}
