"""
Payments Router - membership checkout.

The webhook that completes the flow lives in webhooks.py.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_membership_service
from app.api.responses import ok
from app.api.schemas.payment import CheckoutOut
from app.core.auth import CurrentUser, get_current_user
from app.core.services.membership_service import MembershipService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-preference")
async def create_preference(
    current_user: CurrentUser = Depends(get_current_user),
    membership: MembershipService = Depends(get_membership_service),
):
    """Create a hosted checkout for the annual membership."""
    checkout = await membership.create_checkout(current_user.uid, current_user.email)
    logger.info(f"Checkout {checkout.id} created for {current_user.uid}")
    # id/init_point are repeated at the top level for older clients
    return ok(
        CheckoutOut(id=checkout.id, init_point=checkout.init_point),
        id=checkout.id,
        init_point=checkout.init_point,
    )
