"""
Mercado Pago Provider - Checkout Pro preferences and payment lookups over the REST API.

Environment (via Settings):
- MP_ACCESS_TOKEN      bearer token of the seller account
- MP_WEBHOOK_SECRET    secret used to sign notifications (x-signature header)
- MP_API_URL           API base, default https://api.mercadopago.com
- FRONTEND_URL         base for the success/failure/pending redirects
- BACKEND_URL          base for the notification URL
"""

import hashlib
import hmac
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from app.payments.base import (
    CheckoutResult,
    MembershipItem,
    PaymentGatewayError,
    PaymentProvider,
    PaymentStatus,
)

logger = logging.getLogger(__name__)


def parse_signature_header(value: str) -> Dict[str, str]:
    """``ts=1704908010,v1=618c85...`` -> {"ts": "...", "v1": "..."}"""
    parts = {}
    for chunk in value.split(","):
        key, sep, val = chunk.partition("=")
        if sep:
            parts[key.strip()] = val.strip()
    return parts


def build_signature_manifest(data_id: Optional[str], request_id: Optional[str], ts: Optional[str]) -> str:
    manifest = ""
    if data_id:
        manifest += f"id:{data_id.lower() if data_id.isalnum() else data_id};"
    if request_id:
        manifest += f"request-id:{request_id};"
    if ts:
        manifest += f"ts:{ts};"
    return manifest


class MercadoPagoProvider(PaymentProvider):

    def __init__(
        self,
        access_token: str,
        frontend_url: str,
        backend_url: str,
        webhook_secret: str = "",
        api_url: str = "https://api.mercadopago.com",
        timeout: float = 15.0,
        item: Optional[MembershipItem] = None,
    ):
        self.access_token = access_token
        self.frontend_url = frontend_url.rstrip("/")
        self.backend_url = backend_url.rstrip("/")
        self.webhook_secret = webhook_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.item = item or MembershipItem()
        self.session = requests.Session()

        if not self.access_token:
            logger.warning("MP_ACCESS_TOKEN not set: checkout and payment lookups will fail")
        if not self.webhook_secret:
            logger.warning("MP_WEBHOOK_SECRET not set: webhook signatures are NOT verified")

    def get_name(self) -> str:
        return "mercadopago"

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        url = f"{self.api_url}{path}"
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PaymentGatewayError(f"Mercado Pago {method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise PaymentGatewayError(
                f"Mercado Pago {method} {path} returned {response.status_code}: {response.text[:500]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise PaymentGatewayError(f"Mercado Pago {method} {path} returned invalid JSON") from e

    def build_preference(self, user_id: str, email: str) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "id": self.item.id,
                    "title": self.item.title,
                    "quantity": 1,
                    "unit_price": self.item.unit_price,
                    "currency_id": self.item.currency,
                }
            ],
            "payer": {"email": email},
            "external_reference": user_id,
            "back_urls": {
                "success": f"{self.frontend_url}/pago-exitoso",
                "failure": f"{self.frontend_url}/pago-fallido",
                "pending": f"{self.frontend_url}/pago-pendiente",
            },
            "auto_return": "approved",
            "notification_url": f"{self.backend_url}/api/payments/webhook",
        }

    def create_checkout(self, user_id: str, email: str) -> CheckoutResult:
        data = self._request("POST", "/checkout/preferences", json=self.build_preference(user_id, email))
        if not data.get("id") or not data.get("init_point"):
            raise PaymentGatewayError("Mercado Pago preference response lacks id/init_point")
        logger.info(f"Preference {data['id']} created for user {user_id}")
        return CheckoutResult(id=str(data["id"]), init_point=data["init_point"])

    def get_payment(self, payment_id: str) -> PaymentStatus:
        data = self._request("GET", f"/v1/payments/{payment_id}")
        amount = data.get("transaction_amount")
        return PaymentStatus(
            id=str(data.get("id", payment_id)),
            status=data.get("status", "unknown"),
            external_reference=data.get("external_reference") or None,
            amount=int(amount) if amount is not None else None,
            currency=data.get("currency_id"),
        )

    def verify_webhook(self, headers: Mapping[str, str], data_id: Optional[str]) -> bool:
        if not self.webhook_secret:
            return True

        signature = parse_signature_header(headers.get("x-signature", ""))
        ts = signature.get("ts")
        received = signature.get("v1")
        if not ts or not received:
            logger.warning("Webhook rejected: missing x-signature ts/v1")
            return False

        manifest = build_signature_manifest(data_id, headers.get("x-request-id"), ts)
        expected = hmac.new(
            self.webhook_secret.encode(),
            manifest.encode(),
            hashlib.sha256,
        ).hexdigest()
        if not hmac.compare_digest(expected, received):
            logger.warning(f"Webhook rejected: signature mismatch for data.id={data_id}")
            return False
        return True
