"""Checkout creation and webhook reconciliation."""

import hashlib
import hmac

import pytest

from app.payments.base import MembershipItem, PaymentGatewayError
from app.payments.mercadopago_provider import MercadoPagoProvider, build_signature_manifest
from conftest import auth, make_member


def _webhook(client, payment_id, topic="payment"):
    return client.post(f"/api/payments/webhook?topic={topic}&id={payment_id}")


def _me(client, uid):
    return client.get("/api/auth/me", headers=auth(uid)).json()["data"]


class TestCreatePreference:
    def test_returns_checkout(self, test_client, payments):
        r = test_client.post("/api/payments/create-preference", headers=auth("ana"))
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["data"] == {"id": "pref-ana", "init_point": "https://pay.test/checkout/ana"}
        assert body["id"] == "pref-ana"
        assert body["init_point"] == "https://pay.test/checkout/ana"
        assert payments.checkouts == [("ana", "ana@test.local")]

    def test_requires_authentication(self, test_client):
        assert test_client.post("/api/payments/create-preference").status_code == 401

    def test_gateway_failure(self, test_client, payments):
        payments.fail_checkout = True
        r = test_client.post("/api/payments/create-preference", headers=auth("ana"))
        assert r.status_code == 500
        assert r.json()["error"] == {"code": "PAYMENT_ERROR", "message": "Could not create payment"}


class TestWebhook:
    def test_activates_membership(self, test_client, payments):
        assert _me(test_client, "u1")["membership"]["status"] == "pending"
        payments.approve("p1", "u1")

        r = _webhook(test_client, "p1")
        assert r.status_code == 200
        assert r.json()["outcome"] == "activated"

        membership = _me(test_client, "u1")["membership"]
        assert membership["status"] == "active"
        assert membership["plan"] == "annual"
        assert membership["startedAt"] is not None

    def test_replay_does_not_extend_expiry(self, test_client, payments):
        make_member(test_client, payments, "u1")
        first = _me(test_client, "u1")["membership"]

        r = _webhook(test_client, "pay-u1")
        assert r.status_code == 200
        assert r.json()["outcome"] == "duplicate"

        second = _me(test_client, "u1")["membership"]
        assert second["expiresAt"] == first["expiresAt"]
        assert second["startedAt"] == first["startedAt"]
        # the ledger short-circuits before the gateway is asked again
        assert payments.lookups == ["pay-u1"]

    def test_other_topics_are_ignored(self, test_client, payments):
        r = _webhook(test_client, "m1", topic="merchant_order")
        assert r.status_code == 200
        assert r.json()["outcome"] == "ignored_topic"
        assert payments.lookups == []

    def test_missing_id(self, test_client):
        r = test_client.post("/api/payments/webhook?topic=payment")
        assert r.status_code == 200
        assert r.json()["outcome"] == "missing_id"

    @pytest.mark.parametrize("status", ["pending", "rejected", "in_process"])
    def test_non_approved_payment_changes_nothing(self, test_client, payments, status):
        _me(test_client, "u1")
        payments.approve("p1", "u1", status=status)
        assert _webhook(test_client, "p1").json()["outcome"] == "not_approved"
        assert _me(test_client, "u1")["membership"]["status"] == "pending"

    def test_unattributed_payment(self, test_client, payments):
        payments.approve("p1", None)
        assert _webhook(test_client, "p1").json()["outcome"] == "unattributed"

    def test_body_notification_format(self, test_client, payments):
        _me(test_client, "u1")
        payments.approve("123", "u1")
        r = test_client.post("/api/payments/webhook", json={"type": "payment", "data": {"id": 123}})
        assert r.status_code == 200
        assert r.json()["outcome"] == "activated"

    def test_query_data_id_format(self, test_client, payments):
        _me(test_client, "u1")
        payments.approve("456", "u1")
        r = test_client.post("/api/payments/webhook?type=payment&data.id=456")
        assert r.json()["outcome"] == "activated"

    def test_invalid_signature_is_rejected(self, test_client, payments):
        _me(test_client, "u1")
        payments.approve("p1", "u1")
        payments.accept_webhooks = False

        r = _webhook(test_client, "p1")
        assert r.status_code == 401
        assert r.json()["error"]["code"] == "INVALID_SIGNATURE"
        assert _me(test_client, "u1")["membership"]["status"] == "pending"


class TestReconciliationFailures:
    def test_gateway_failure_is_acknowledged_and_audited(self, test_client, payments, admin_headers):
        payments.unreachable = True
        r = _webhook(test_client, "p9")
        assert r.status_code == 200
        assert r.json()["outcome"] == "failed"

        failures = test_client.get("/api/admin/reconciliation-failures", headers=admin_headers).json()["data"]
        assert len(failures) == 1
        assert failures[0]["paymentId"] == "p9"
        assert failures[0]["attempts"] == 1
        assert "unreachable" in failures[0]["error"]
        assert failures[0]["resolved"] is False

    def test_redelivery_increments_attempts(self, test_client, payments, admin_headers):
        payments.unreachable = True
        _webhook(test_client, "p9")
        _webhook(test_client, "p9")
        failures = test_client.get("/api/admin/reconciliation-failures", headers=admin_headers).json()["data"]
        assert [f["attempts"] for f in failures] == [2]

    def test_unknown_reference_is_audited(self, test_client, payments, admin_headers):
        payments.approve("p1", "ghost")
        assert _webhook(test_client, "p1").json()["outcome"] == "failed"
        failures = test_client.get("/api/admin/reconciliation-failures", headers=admin_headers).json()["data"]
        assert failures[0]["externalReference"] == "ghost"

    def test_retry_resolves_failure(self, test_client, payments, admin_headers):
        _me(test_client, "u1")
        payments.unreachable = True
        _webhook(test_client, "p1")
        failure_id = test_client.get(
            "/api/admin/reconciliation-failures", headers=admin_headers
        ).json()["data"][0]["id"]

        payments.unreachable = False
        payments.approve("p1", "u1")
        r = test_client.post(f"/api/admin/reconciliation-failures/{failure_id}/retry", headers=admin_headers)
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["outcome"] == "activated"
        assert data["failure"]["resolved"] is True
        assert _me(test_client, "u1")["membership"]["status"] == "active"

        open_failures = test_client.get("/api/admin/reconciliation-failures", headers=admin_headers).json()["data"]
        assert open_failures == []

    def test_retry_unknown_failure(self, test_client, admin_headers):
        r = test_client.post("/api/admin/reconciliation-failures/999/retry", headers=admin_headers)
        assert r.status_code == 404

    def test_requires_admin(self, test_client):
        r = test_client.get("/api/admin/reconciliation-failures", headers=auth("u1"))
        assert r.status_code == 403
        assert r.json()["error"]["code"] == "FORBIDDEN"


class TestMercadoPagoProvider:
    SECRET = "s3cret"

    def _provider(self, secret=SECRET):
        return MercadoPagoProvider(
            access_token="TEST-token",
            frontend_url="https://front.test/",
            backend_url="https://api.test",
            webhook_secret=secret,
            item=MembershipItem(unit_price=12000),
        )

    def _sign(self, data_id, request_id, ts):
        manifest = build_signature_manifest(data_id, request_id, ts)
        return hmac.new(self.SECRET.encode(), manifest.encode(), hashlib.sha256).hexdigest()

    def test_preference_body(self):
        body = self._provider().build_preference("u1", "u1@test.local")
        assert body["external_reference"] == "u1"
        assert body["payer"] == {"email": "u1@test.local"}
        assert body["items"][0]["id"] == "membresia-anual"
        assert body["items"][0]["unit_price"] == 12000
        assert body["items"][0]["currency_id"] == "CLP"
        assert body["back_urls"]["success"] == "https://front.test/pago-exitoso"
        assert body["back_urls"]["failure"] == "https://front.test/pago-fallido"
        assert body["back_urls"]["pending"] == "https://front.test/pago-pendiente"
        assert body["auto_return"] == "approved"
        assert body["notification_url"] == "https://api.test/api/payments/webhook"

    def test_manifest(self):
        assert build_signature_manifest("ABC123", "req-1", "1700") == "id:abc123;request-id:req-1;ts:1700;"
        assert build_signature_manifest("123", None, "1700") == "id:123;ts:1700;"

    def test_valid_signature(self):
        signature = self._sign("123", "req-1", "1700")
        headers = {"x-signature": f"ts=1700,v1={signature}", "x-request-id": "req-1"}
        assert self._provider().verify_webhook(headers, "123") is True

    def test_tampered_signature(self):
        signature = self._sign("123", "req-1", "1700")
        headers = {"x-signature": f"ts=1700,v1={signature}", "x-request-id": "req-1"}
        assert self._provider().verify_webhook(headers, "124") is False

    def test_missing_signature(self):
        assert self._provider().verify_webhook({}, "123") is False

    def test_no_secret_skips_verification(self):
        assert self._provider(secret="").verify_webhook({}, "123") is True

    def test_gateway_error(self, monkeypatch):
        provider = self._provider()

        class Response:
            status_code = 401
            text = "unauthorized"

        monkeypatch.setattr(provider.session, "request", lambda *a, **kw: Response())
        with pytest.raises(PaymentGatewayError):
            provider.get_payment("1")

    def test_payment_parsing(self, monkeypatch):
        provider = self._provider()

        class Response:
            status_code = 200

            def json(self):
                return {
                    "id": 987,
                    "status": "approved",
                    "external_reference": "u1",
                    "transaction_amount": 10000.0,
                    "currency_id": "CLP",
                }

        monkeypatch.setattr(provider.session, "request", lambda *a, **kw: Response())
        payment = provider.get_payment("987")
        assert payment.id == "987"
        assert payment.approved
        assert payment.external_reference == "u1"
        assert payment.amount == 10000
