"""Service provider listings and admin verification."""

import pytest

from conftest import auth, make_member


@pytest.fixture
def provider(test_client, payments):
    return make_member(test_client, payments, "tutor")


@pytest.fixture
def valid_service():
    return {
        "businessName": "Clases de matemáticas",
        "description": "Reforzamiento para enseñanza media",
        "category": "clases",
        "contact": {"whatsapp": "+56911112222"},
        "images": ["https://img.test/s1.jpg"],
    }


def _create(client, headers, data):
    r = client.post("/api/services", headers=headers, json=data)
    assert r.status_code == 201, r.text
    return r.json()["data"]


class TestCreate:
    def test_create(self, test_client, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        assert service["userId"] == "tutor"
        assert service["contact"] == {"phone": None, "email": None, "whatsapp": "+56911112222"}
        assert service["verification"]["status"] == "pending"
        assert service["isActive"] is True
        assert service["ratingsCount"] == 0

    def test_contact_required(self, test_client, provider, valid_service):
        r = test_client.post("/api/services", headers=provider, json={**valid_service, "contact": {}})
        assert r.status_code == 400
        assert "contact method" in r.json()["error"]["message"]

    def test_too_many_images(self, test_client, provider, valid_service):
        images = [f"https://img.test/{i}.jpg" for i in range(6)]
        r = test_client.post("/api/services", headers=provider, json={**valid_service, "images": images})
        assert r.status_code == 400

    def test_requires_membership(self, test_client, valid_service):
        r = test_client.post("/api/services", headers=auth("guest"), json=valid_service)
        assert r.status_code == 403
        assert r.json()["error"]["code"] == "MEMBERSHIP_INACTIVE"


class TestOwnership:
    def test_update(self, test_client, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        r = test_client.put(
            f"/api/services/{service['id']}",
            headers=provider,
            json={"contact": {"email": "tutor@test.local"}},
        )
        assert r.status_code == 200
        assert r.json()["data"]["contact"]["email"] == "tutor@test.local"
        assert r.json()["data"]["contact"]["whatsapp"] is None

    def test_other_member_cannot_update(self, test_client, payments, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        other = make_member(test_client, payments, "other")
        r = test_client.put(f"/api/services/{service['id']}", headers=other, json={"category": "x"})
        assert r.status_code == 403
        r = test_client.patch(f"/api/services/{service['id']}/active", headers=other, json={"isActive": False})
        assert r.status_code == 403

    def test_deactivate_hides_from_listing(self, test_client, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        r = test_client.patch(f"/api/services/{service['id']}/active", headers=provider, json={"isActive": False})
        assert r.status_code == 200
        assert r.json()["data"]["isActive"] is False

        assert test_client.get("/api/services", headers=provider).json()["data"] == []
        assert len(test_client.get("/api/services/mine", headers=provider).json()["data"]) == 1

    def test_missing_service(self, test_client, provider):
        assert test_client.get("/api/services/999", headers=provider).status_code == 404


class TestVerification:
    def test_admin_verifies(self, test_client, admin_headers, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        r = test_client.post(
            f"/api/admin/services/{service['id']}/verification",
            headers=admin_headers,
            json={"status": "verified"},
        )
        assert r.status_code == 200
        verification = r.json()["data"]["verification"]
        assert verification["status"] == "verified"
        assert verification["verifiedBy"] == "root"
        assert verification["verifiedAt"] is not None

        verified = test_client.get("/api/services?verified=true", headers=provider).json()["data"]
        assert [s["id"] for s in verified] == [service["id"]]

    def test_back_to_pending_clears_verifier(self, test_client, admin_headers, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        url = f"/api/admin/services/{service['id']}/verification"
        test_client.post(url, headers=admin_headers, json={"status": "verified"})
        r = test_client.post(url, headers=admin_headers, json={"status": "pending"})
        assert r.json()["data"]["verification"] == {"status": "pending", "verifiedBy": None, "verifiedAt": None}

    def test_unverified_hidden_from_verified_filter(self, test_client, provider, valid_service):
        _create(test_client, provider, valid_service)
        assert test_client.get("/api/services?verified=true", headers=provider).json()["data"] == []
        assert len(test_client.get("/api/services", headers=provider).json()["data"]) == 1

    def test_members_cannot_verify(self, test_client, provider, valid_service):
        service = _create(test_client, provider, valid_service)
        r = test_client.post(
            f"/api/admin/services/{service['id']}/verification",
            headers=provider,
            json={"status": "verified"},
        )
        assert r.status_code == 403
