"""
Payment providers - abstraction for payment gateways.

Usage:
    from app.payments import get_payment_provider

    provider = get_payment_provider(settings)
    checkout = provider.create_checkout(user_id=uid, email=email)

Set PAYMENT_PROVIDER env var to "mercadopago" (default) or "manual".
"""

import logging

from app.payments.base import (
    CheckoutResult,
    MembershipItem,
    PaymentGatewayError,
    PaymentProvider,
    PaymentStatus,
)
from app.payments.manual_provider import ManualProvider
from app.payments.mercadopago_provider import MercadoPagoProvider

logger = logging.getLogger(__name__)


def get_payment_provider(settings) -> PaymentProvider:
    """Return the configured payment provider instance."""
    name = settings.payment_provider
    if name == "manual":
        return ManualProvider(frontend_url=settings.frontend_url)
    if name != "mercadopago":
        logger.warning(f"Unknown PAYMENT_PROVIDER '{name}', using mercadopago")
    return MercadoPagoProvider(
        access_token=settings.mp_access_token,
        frontend_url=settings.frontend_url,
        backend_url=settings.backend_url,
        webhook_secret=settings.mp_webhook_secret,
        api_url=settings.mp_api_url,
        timeout=settings.mp_timeout_seconds,
        item=MembershipItem(
            unit_price=settings.membership_price,
            currency=settings.membership_currency,
        ),
    )


__all__ = [
    "get_payment_provider",
    "PaymentProvider",
    "PaymentGatewayError",
    "ManualProvider",
    "MercadoPagoProvider",
    "CheckoutResult",
    "MembershipItem",
    "PaymentStatus",
]
