"""Ratings of sellers and service providers."""

import pytest

from conftest import auth, make_member


def _rate(client, uid, target_id, target_type="user", score=5, recommend=True, comment=None):
    body = {"targetId": target_id, "targetType": target_type, "score": score, "recommend": recommend}
    if comment is not None:
        body["comment"] = comment
    return client.post("/api/ratings", headers=auth(uid), json=body)


def _profile(client, uid):
    return client.get("/api/auth/me", headers=auth(uid)).json()["data"]


@pytest.fixture
def seller(test_client):
    _profile(test_client, "seller")
    return "seller"


class TestUserRatings:
    def test_create(self, test_client, seller):
        r = _rate(test_client, "buyer", seller, score=4, comment="Muy amable")
        assert r.status_code == 201
        rating = r.json()["data"]
        assert rating["reviewerId"] == "buyer"
        assert rating["score"] == 4
        assert rating["comment"] == "Muy amable"

    def test_aggregate(self, test_client, seller):
        _rate(test_client, "a", seller, score=5)
        _rate(test_client, "b", seller, score=4, recommend=False)
        _rate(test_client, "c", seller, score=4)

        stats = _profile(test_client, seller)["stats"]
        assert stats["averageRating"] == 4.3
        assert stats["ratingsCount"] == 3
        assert stats["recommendations"] == 2

    def test_duplicate(self, test_client, seller):
        assert _rate(test_client, "buyer", seller, score=5).status_code == 201
        r = _rate(test_client, "buyer", seller, score=1)
        assert r.status_code == 409
        assert r.json()["error"]["code"] == "ALREADY_RATED"

        stats = _profile(test_client, seller)["stats"]
        assert stats["ratingsCount"] == 1
        assert stats["averageRating"] == 5.0

    def test_self_rating(self, test_client, seller):
        r = _rate(test_client, seller, seller)
        assert r.status_code == 400
        assert _profile(test_client, seller)["stats"]["ratingsCount"] == 0

    @pytest.mark.parametrize("score", [0, 6])
    def test_score_range(self, test_client, seller, score):
        assert _rate(test_client, "buyer", seller, score=score).status_code == 400

    def test_unknown_target(self, test_client):
        r = _rate(test_client, "buyer", "ghost")
        assert r.status_code == 404

    def test_blank_comment_is_dropped(self, test_client, seller):
        r = _rate(test_client, "buyer", seller, comment="   ")
        assert r.json()["data"]["comment"] is None

    def test_list_and_check(self, test_client, seller):
        query = f"targetId={seller}&targetType=user"
        check = test_client.get(f"/api/ratings/check?{query}", headers=auth("buyer")).json()["data"]
        assert check == {"hasRated": False}

        _rate(test_client, "buyer", seller)
        check = test_client.get(f"/api/ratings/check?{query}", headers=auth("buyer")).json()["data"]
        assert check == {"hasRated": True}

        ratings = test_client.get(f"/api/ratings?{query}", headers=auth("buyer")).json()["data"]
        assert [r["reviewerId"] for r in ratings] == ["buyer"]

    def test_invalid_target_type(self, test_client, seller):
        r = test_client.get(f"/api/ratings?targetId={seller}&targetType=article", headers=auth("buyer"))
        assert r.status_code == 400


class TestServiceRatings:
    @pytest.fixture
    def service_id(self, test_client, payments):
        headers = make_member(test_client, payments, "tutor")
        r = test_client.post("/api/services", headers=headers, json={
            "businessName": "Clases de piano",
            "description": "Todos los niveles",
            "category": "clases",
            "contact": {"phone": "+56922223333"},
        })
        assert r.status_code == 201
        return str(r.json()["data"]["id"])

    def test_aggregate_on_service(self, test_client, service_id):
        _rate(test_client, "a", service_id, target_type="service", score=3)
        _rate(test_client, "b", service_id, target_type="service", score=4)

        service = test_client.get(f"/api/services/{service_id}", headers=auth("a")).json()["data"]
        assert service["averageRating"] == 3.5
        assert service["ratingsCount"] == 2
        assert service["recommendations"] == 2

        # the provider's own seller stats are untouched
        assert _profile(test_client, "tutor")["stats"]["ratingsCount"] == 0

    def test_owner_cannot_rate_own_service(self, test_client, service_id):
        assert _rate(test_client, "tutor", service_id, target_type="service").status_code == 400

    def test_non_numeric_service_id(self, test_client):
        assert _rate(test_client, "a", "abc", target_type="service").status_code == 404

    @pytest.mark.parametrize("target_id", ["²", "١٢", "99999999999999999999", "0"])
    def test_unresolvable_service_id(self, test_client, target_id):
        r = _rate(test_client, "a", target_id, target_type="service")
        assert r.status_code == 404
        assert r.json()["error"]["code"] == "NOT_FOUND"

    def test_zero_padded_id_is_the_same_service(self, test_client, service_id):
        assert _rate(test_client, "a", service_id, target_type="service", score=5).status_code == 201

        r = _rate(test_client, "a", "0" + service_id, target_type="service", score=1)
        assert r.status_code == 409
        assert r.json()["error"]["code"] == "ALREADY_RATED"

        service = test_client.get(f"/api/services/{service_id}", headers=auth("a")).json()["data"]
        assert service["averageRating"] == 5.0
        assert service["ratingsCount"] == 1

    def test_lookups_accept_padded_id(self, test_client, service_id):
        rating = _rate(test_client, "a", "00" + service_id, target_type="service").json()["data"]
        assert rating["targetId"] == service_id

        query = f"targetId=0{service_id}&targetType=service"
        check = test_client.get(f"/api/ratings/check?{query}", headers=auth("a")).json()["data"]
        assert check == {"hasRated": True}
        ratings = test_client.get(f"/api/ratings?{query}", headers=auth("a")).json()["data"]
        assert len(ratings) == 1
