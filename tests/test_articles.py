"""Article listings: validation, ownership, counters and filters."""

import pytest

from conftest import auth, make_member


@pytest.fixture
def seller(test_client, payments):
    return make_member(test_client, payments, "seller")


def _create(client, headers, article, **overrides):
    r = client.post("/api/articles", headers=headers, json={**article, **overrides})
    assert r.status_code == 201, r.text
    return r.json()["data"]


def _stats(client, uid):
    return client.get("/api/auth/me", headers=auth(uid)).json()["data"]["stats"]


class TestCreate:
    def test_create(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        assert article["sellerId"] == "seller"
        assert article["status"] == "active"
        assert article["priceNegotiable"] is True
        assert article["metadata"] == {"size": "12", "brand": "Colegio"}
        assert article["views"] == 0
        assert _stats(test_client, "seller")["articlesPublished"] == 1

    @pytest.mark.parametrize("count,message", [
        (0, "At least one image is required"),
        (6, "At most 5 images are allowed"),
    ])
    def test_image_count(self, test_client, seller, valid_article, count, message):
        images = [f"https://img.test/{i}.jpg" for i in range(count)]
        r = test_client.post("/api/articles", headers=seller, json={**valid_article, "images": images})
        assert r.status_code == 400
        assert r.json()["error"]["code"] == "VALIDATION_ERROR"
        assert message in r.json()["error"]["message"]

        assert test_client.get("/api/articles/my-listings", headers=seller).json()["data"] == []
        assert _stats(test_client, "seller")["articlesPublished"] == 0

    def test_blank_image_entries_do_not_count(self, test_client, seller, valid_article):
        images = ["   ", ""]
        r = test_client.post("/api/articles", headers=seller, json={**valid_article, "images": images})
        assert r.status_code == 400

    def test_single_image_is_enough(self, test_client, seller, valid_article):
        images = ["https://img.test/1.jpg", "  "]
        article = _create(test_client, seller, valid_article, images=images)
        assert article["images"] == ["https://img.test/1.jpg"]

    @pytest.mark.parametrize("field,value", [
        ("price", 0),
        ("price", -100),
        ("condition", "broken"),
        ("title", ""),
    ])
    def test_invalid_fields(self, test_client, seller, valid_article, field, value):
        r = test_client.post("/api/articles", headers=seller, json={**valid_article, field: value})
        assert r.status_code == 400

    def test_requires_authentication(self, test_client, valid_article):
        assert test_client.post("/api/articles", json=valid_article).status_code == 401


class TestOwnership:
    def test_owner_can_update(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        r = test_client.put(f"/api/articles/{article['id']}", headers=seller, json={"price": 6000})
        assert r.status_code == 200
        assert r.json()["data"]["price"] == 6000
        assert r.json()["data"]["title"] == valid_article["title"]

    def test_update_validates_images(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        r = test_client.put(f"/api/articles/{article['id']}", headers=seller, json={"images": []})
        assert r.status_code == 400

    def test_other_member_cannot_modify(self, test_client, payments, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        other = make_member(test_client, payments, "other")

        r = test_client.put(f"/api/articles/{article['id']}", headers=other, json={"price": 1})
        assert r.status_code == 403
        assert r.json()["error"]["code"] == "FORBIDDEN"
        assert test_client.delete(f"/api/articles/{article['id']}", headers=other).status_code == 403
        r = test_client.patch(f"/api/articles/{article['id']}/status", headers=other, json={"status": "sold"})
        assert r.status_code == 403

    def test_delete(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        r = test_client.delete(f"/api/articles/{article['id']}", headers=seller)
        assert r.status_code == 200
        assert test_client.get(f"/api/articles/{article['id']}", headers=seller).status_code == 404
        assert _stats(test_client, "seller")["articlesPublished"] == 0

    def test_missing_article(self, test_client, seller):
        assert test_client.put("/api/articles/999", headers=seller, json={"price": 1}).status_code == 404


class TestStatus:
    def test_sold_counts_once(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        url = f"/api/articles/{article['id']}/status"
        for _ in range(2):
            r = test_client.patch(url, headers=seller, json={"status": "sold"})
            assert r.status_code == 200
            assert r.json()["data"]["status"] == "sold"
        assert _stats(test_client, "seller")["totalSales"] == 1

    def test_status_change_without_membership(self, test_client, admin_headers, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        test_client.put(
            "/api/admin/users/seller/membership",
            headers=admin_headers,
            json={"status": "expired"},
        )
        r = test_client.patch(f"/api/articles/{article['id']}/status", headers=seller, json={"status": "reserved"})
        assert r.status_code == 200

    def test_invalid_status(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        r = test_client.patch(f"/api/articles/{article['id']}/status", headers=seller, json={"status": "lost"})
        assert r.status_code == 400


class TestBrowse:
    def test_get_counts_views(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        test_client.get(f"/api/articles/{article['id']}", headers=auth("visitor"))
        r = test_client.get(f"/api/articles/{article['id']}", headers=auth("visitor"))
        assert r.status_code == 200
        assert r.json()["data"]["views"] == 2

    def test_browsing_does_not_need_membership(self, test_client, seller, valid_article):
        _create(test_client, seller, valid_article)
        r = test_client.get("/api/articles", headers=auth("visitor"))
        assert r.status_code == 200
        assert len(r.json()["data"]) == 1

    def test_filters(self, test_client, seller, valid_article):
        _create(test_client, seller, valid_article, price=3000, category="libros")
        _create(test_client, seller, valid_article, price=9000, condition="new")
        sold = _create(test_client, seller, valid_article, price=5000)
        test_client.patch(f"/api/articles/{sold['id']}/status", headers=seller, json={"status": "sold"})

        def prices(query):
            r = test_client.get(f"/api/articles?{query}", headers=seller)
            assert r.status_code == 200
            return sorted(a["price"] for a in r.json()["data"])

        assert prices("") == [3000, 9000]
        assert prices("category=libros") == [3000]
        assert prices("condition=new") == [9000]
        assert prices("minPrice=4000") == [9000]
        assert prices("maxPrice=4000") == [3000]
        assert prices("sellerId=nobody") == []

    def test_pagination(self, test_client, seller, valid_article):
        for i in range(3):
            _create(test_client, seller, valid_article, title=f"Artículo {i}")

        r = test_client.get("/api/articles?page=1&limit=2", headers=seller)
        body = r.json()
        assert [a["title"] for a in body["data"]] == ["Artículo 2", "Artículo 1"]
        assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "hasMore": True}

        body = test_client.get("/api/articles?page=2&limit=2", headers=seller).json()
        assert len(body["data"]) == 1
        assert body["pagination"]["hasMore"] is False

    def test_limit_bounds(self, test_client, seller):
        assert test_client.get("/api/articles?limit=101", headers=seller).status_code == 400
        assert test_client.get("/api/articles?page=0", headers=seller).status_code == 400

    def test_my_listings_include_every_status(self, test_client, seller, valid_article):
        article = _create(test_client, seller, valid_article)
        test_client.patch(f"/api/articles/{article['id']}/status", headers=seller, json={"status": "inactive"})
        mine = test_client.get("/api/articles/my-listings", headers=seller).json()["data"]
        assert [a["status"] for a in mine] == ["inactive"]
