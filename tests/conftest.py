"""
Pytest global configuration.

- Each test gets its own SQLite file (aiosqlite) with the schema created at startup
- Firebase and Mercado Pago are replaced by in-memory fakes injected through create_app
- Tokens understood by the fake identity provider:
    "token-<uid>" -> regular user <uid>
    "admin-<uid>" -> user <uid> carrying the admin claim
"""

from typing import Dict, List, Mapping, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.main import create_app
from app.core.config import Settings
from app.core.identity import Identity, IdentityProvider, InvalidTokenError
from app.payments.base import (
    CheckoutResult,
    PaymentGatewayError,
    PaymentProvider,
    PaymentStatus,
)


# ============================================================================
# FAKES
# ============================================================================

class FakeIdentityProvider(IdentityProvider):

    def __init__(self):
        self.disabled: Dict[str, bool] = {}
        self.admin_claims: Dict[str, bool] = {}
        self.deleted: List[str] = []
        self.refuse_delete = False

    def verify_token(self, token: str) -> Identity:
        prefix, _, uid = token.partition("-")
        if prefix not in ("token", "admin") or not uid:
            raise InvalidTokenError("Invalid token")
        return Identity(
            uid=uid,
            email=f"{uid}@test.local",
            name=uid.title(),
            email_verified=True,
            is_admin=prefix == "admin",
        )

    def set_disabled(self, uid: str, disabled: bool) -> bool:
        self.disabled[uid] = disabled
        return True

    def set_admin_claim(self, uid: str, is_admin: bool) -> bool:
        self.admin_claims[uid] = is_admin
        return True

    def delete_user(self, uid: str) -> bool:
        if self.refuse_delete:
            return False
        self.deleted.append(uid)
        return True


class FakePaymentProvider(PaymentProvider):
    """Scripted gateway: tests register payments in ``payments``."""

    def __init__(self):
        self.payments: Dict[str, PaymentStatus] = {}
        self.checkouts: List[tuple] = []
        self.lookups: List[str] = []
        self.fail_checkout = False
        self.unreachable = False
        self.accept_webhooks = True

    def get_name(self) -> str:
        return "fake"

    def create_checkout(self, user_id: str, email: str) -> CheckoutResult:
        if self.fail_checkout:
            raise PaymentGatewayError("gateway said no")
        self.checkouts.append((user_id, email))
        return CheckoutResult(id=f"pref-{user_id}", init_point=f"https://pay.test/checkout/{user_id}")

    def get_payment(self, payment_id: str) -> PaymentStatus:
        self.lookups.append(payment_id)
        if self.unreachable:
            raise PaymentGatewayError("gateway unreachable")
        if payment_id not in self.payments:
            raise PaymentGatewayError(f"payment {payment_id} not found")
        return self.payments[payment_id]

    def verify_webhook(self, headers: Mapping[str, str], data_id: Optional[str]) -> bool:
        return self.accept_webhooks

    def approve(self, payment_id: str, uid: Optional[str], status: str = "approved") -> None:
        self.payments[payment_id] = PaymentStatus(
            id=payment_id,
            status=status,
            external_reference=uid,
            amount=10000,
            currency="CLP",
        )


# ============================================================================
# APP FIXTURES
# ============================================================================

@pytest.fixture
def settings(tmp_path):
    db_file = tmp_path / "test.db"
    return Settings(
        database_url=f"sqlite:///{db_file}",
        async_database_url=f"sqlite+aiosqlite:///{db_file}",
        auto_create_schema=True,
        auth_dev_mode=False,
        cors_origins=["http://localhost:5173"],
        payment_provider="manual",
        log_level="WARNING",
    )


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def payments():
    return FakePaymentProvider()


@pytest.fixture
def test_client(settings, identity, payments):
    app = create_app(settings, identity=identity, payment_provider=payments)
    with TestClient(app) as client:
        yield client


# ============================================================================
# HELPERS
# ============================================================================

def auth(uid: str, admin: bool = False) -> dict:
    return {"Authorization": f"Bearer {'admin' if admin else 'token'}-{uid}"}


def make_member(client: TestClient, payments: FakePaymentProvider, uid: str) -> dict:
    """Create the profile and activate it through the real webhook flow."""
    client.get("/api/auth/me", headers=auth(uid))
    payments.approve(f"pay-{uid}", uid)
    r = client.post(f"/api/payments/webhook?topic=payment&id=pay-{uid}")
    assert r.status_code == 200
    assert r.json()["outcome"] == "activated"
    return auth(uid)


@pytest.fixture
def admin_headers(test_client):
    headers = auth("root", admin=True)
    assert test_client.get("/api/auth/me", headers=headers).status_code == 200
    return headers


@pytest.fixture
def valid_article():
    return {
        "title": "Polerón talla 12",
        "description": "Polerón del colegio, poco uso",
        "category": "uniformes",
        "condition": "like_new",
        "price": 8000,
        "priceNegotiable": True,
        "images": [
            "https://img.test/1.jpg",
            "https://img.test/2.jpg",
            "https://img.test/3.jpg",
        ],
        "metadata": {"size": "12", "brand": "Colegio"},
    }
