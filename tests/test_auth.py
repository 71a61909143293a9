"""Authentication: tokens, profile creation, disabled accounts."""

from conftest import auth


class TestTokens:
    def test_missing_token_is_unauthorized(self, test_client):
        r = test_client.get("/api/auth/me")
        assert r.status_code == 401
        assert r.json()["error"]["code"] == "UNAUTHORIZED"

    def test_invalid_token(self, test_client):
        r = test_client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert r.status_code == 401
        assert r.json()["error"]["code"] == "INVALID_TOKEN"

    def test_verify_token(self, test_client):
        r = test_client.post("/api/auth/verify-token", json={"token": "token-ana"})
        assert r.status_code == 200
        assert r.json()["data"] == {"uid": "ana", "email": "ana@test.local", "emailVerified": True}

    def test_verify_token_rejects_bad_token(self, test_client):
        r = test_client.post("/api/auth/verify-token", json={"token": "nope"})
        assert r.status_code == 401
        assert r.json()["error"]["code"] == "INVALID_TOKEN"

    def test_verify_token_requires_body(self, test_client):
        r = test_client.post("/api/auth/verify-token", json={})
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "VALIDATION_ERROR"


class TestProfile:
    def test_first_request_creates_pending_profile(self, test_client):
        r = test_client.get("/api/auth/me", headers=auth("ana"))
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["uid"] == "ana"
        assert data["email"] == "ana@test.local"
        assert data["membership"]["status"] == "pending"
        assert data["membership"]["plan"] == "annual"
        assert data["membership"]["startedAt"] is None
        assert data["stats"]["articlesPublished"] == 0
        assert data["membershipAccess"] == {
            "allowed": False,
            "reason": "MEMBERSHIP_INACTIVE",
            "message": "Your membership is not active",
        }

    def test_profile_is_created_once(self, test_client):
        first = test_client.get("/api/auth/me", headers=auth("ana")).json()["data"]
        second = test_client.get("/api/auth/me", headers=auth("ana")).json()["data"]
        assert first["createdAt"] == second["createdAt"]

    def test_update_profile(self, test_client):
        r = test_client.put(
            "/api/auth/me",
            headers=auth("ana"),
            json={"displayName": "  Ana Pérez ", "photoURL": "https://img.test/ana.png", "phone": "+56911111111"},
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["displayName"] == "Ana Pérez"
        assert data["photoURL"] == "https://img.test/ana.png"
        assert data["phone"] == "+56911111111"


class TestDisabledAccount:
    def test_disabled_user_is_denied_everywhere(self, test_client, identity, admin_headers):
        test_client.get("/api/auth/me", headers=auth("bob"))

        r = test_client.post("/api/admin/users/bob/set-status", headers=admin_headers, json={"disabled": True})
        assert r.status_code == 200
        assert r.json()["data"]["disabled"] is True
        assert identity.disabled["bob"] is True

        for method, path in (
            ("get", "/api/auth/me"),
            ("get", "/api/articles"),
            ("get", "/api/categories/admin/all"),
            ("post", "/api/payments/create-preference"),
        ):
            r = getattr(test_client, method)(path, headers=auth("bob"))
            assert r.status_code == 403, path
            assert r.json()["error"]["code"] == "ACCOUNT_DISABLED", path

        # the token itself is still valid
        r = test_client.post("/api/auth/verify-token", json={"token": "token-bob"})
        assert r.status_code == 200

    def test_reenabled_user_gets_access_back(self, test_client, admin_headers):
        test_client.get("/api/auth/me", headers=auth("bob"))
        test_client.post("/api/admin/users/bob/set-status", headers=admin_headers, json={"disabled": True})
        test_client.post("/api/admin/users/bob/set-status", headers=admin_headers, json={"disabled": False})
        assert test_client.get("/api/auth/me", headers=auth("bob")).status_code == 200


class TestDevMode:
    def test_dev_header_authenticates(self, settings, identity, payments):
        from dataclasses import replace

        from fastapi.testclient import TestClient

        from app.api.main import create_app

        app = create_app(replace(settings, auth_dev_mode=True), identity=identity, payment_provider=payments)
        with TestClient(app) as client:
            r = client.get("/api/auth/me", headers={"X-Dev-User": "dev-1"})
            assert r.status_code == 200
            assert r.json()["data"]["uid"] == "dev-1"

            assert client.get("/api/auth/me").status_code == 401

    def test_dev_header_ignored_outside_dev_mode(self, test_client):
        r = test_client.get("/api/auth/me", headers={"X-Dev-User": "dev-1"})
        assert r.status_code == 401
