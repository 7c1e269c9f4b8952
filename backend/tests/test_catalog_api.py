"""
Catalog API tests.

Verifies:
- Reads are public; writes need an admin (401 anonymous, 403 plain user)
- Product/category validation and status codes
- GET /products combines query filters
- Deleting a product clears it from carts; deleting a used category is refused
"""

import pytest


# =============================================================================
# ACCESS CONTROL
# =============================================================================


class TestCatalogAccess:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/products"),
            ("PUT", "/products/1"),
            ("DELETE", "/products/1"),
            ("POST", "/categories"),
            ("PUT", "/categories/1"),
            ("DELETE", "/categories/1"),
        ],
    )
    def test_writes_require_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path, json={})
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/products"),
            ("PUT", "/products/1"),
            ("DELETE", "/products/1"),
            ("POST", "/categories"),
            ("PUT", "/categories/1"),
            ("DELETE", "/categories/1"),
        ],
    )
    def test_writes_forbidden_for_users(self, client, alice, method, path):
        resp = getattr(client, method.lower())(path, json={}, headers=alice["headers"])
        assert resp.status_code == 403

    def test_reads_are_public(self, client, category_id, product_id):
        assert client.get("/categories").status_code == 200
        assert client.get(f"/categories/{category_id}").status_code == 200
        assert client.get(f"/categories/{category_id}/products").status_code == 200
        assert client.get("/products").status_code == 200
        assert client.get(f"/products/{product_id}").status_code == 200


# =============================================================================
# PRODUCTS
# =============================================================================


class TestProducts:
    def test_create_product(self, client, admin, category_id):
        res = client.post(
            "/products",
            json={"name": "Boot", "price": 49.9, "categoryId": category_id, "stock": 7, "color": "brown"},
            headers=admin["headers"],
        )
        assert res.status_code == 201
        body = res.get_json()
        assert body["productId"] is not None
        assert body["price"] == "49.90"
        assert body["stock"] == 7
        assert body["featured"] is False

    def test_missing_image_uses_placeholder(self, app, client, product_id):
        body = client.get(f"/products/{product_id}").get_json()
        assert body["imageUrl"] == app.config["PLACEHOLDER_IMAGE_URL"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Boot", "price": "-1", "categoryId": None},
            {"name": "Boot", "price": "abc"},
            {"price": "5.00"},
            {"name": "Boot", "price": "5.00", "stock": -1},
            {"name": "Boot", "price": "5.00", "productId": 5},
            {"name": "Boot", "price": "1e30"},
            {"name": "Boot", "price": "5.00", "stock": 10 ** 20},
        ],
    )
    def test_create_rejects_bad_payload(self, client, admin, category_id, payload):
        payload = dict(payload)
        payload.setdefault("categoryId", category_id)
        res = client.post("/products", json=payload, headers=admin["headers"])
        assert res.status_code == 400
        assert "error" in res.get_json()

    def test_unknown_category_rejected(self, client, admin):
        res = client.post(
            "/products",
            json={"name": "Boot", "price": "5.00", "categoryId": 9999},
            headers=admin["headers"],
        )
        assert res.status_code == 400

    def test_update_product(self, client, admin, product_id):
        res = client.put(
            f"/products/{product_id}",
            json={"stock": 12, "featured": True},
            headers=admin["headers"],
        )
        assert res.status_code == 200
        body = res.get_json()
        assert body["stock"] == 12
        assert body["featured"] is True
        assert body["name"] == "Widget"

    def test_update_missing_product_404(self, client, admin):
        res = client.put("/products/9999", json={"stock": 1}, headers=admin["headers"])
        assert res.status_code == 404

    def test_get_missing_product_404(self, client):
        res = client.get("/products/9999")
        assert res.status_code == 404
        assert res.get_json() == {"error": "Product not found"}

    def test_delete_product_clears_carts(self, client, admin, alice, product_id, cart_of):
        client.post(f"/cart/products/{product_id}", headers=alice["headers"])
        assert cart_of(alice["id"]) == [(product_id, 1)]

        assert client.delete(f"/products/{product_id}", headers=admin["headers"]).status_code == 204
        assert client.get(f"/products/{product_id}").status_code == 404
        assert cart_of(alice["id"]) == []

        res = client.get("/cart", headers=alice["headers"])
        assert res.get_json()["items"] == {}

    def test_delete_missing_product_404(self, client, admin):
        assert client.delete("/products/9999", headers=admin["headers"]).status_code == 404


# =============================================================================
# SEARCH OVER HTTP
# =============================================================================


class TestProductSearchApi:
    def test_combined_query(self, client, make_category, make_product):
        c1 = make_category("Shirts")
        c2 = make_category("Hats")
        match_a = make_product(name="A", price="5.00", color="blue", category=c1)
        match_b = make_product(name="B", price="20.00", color="navy blue", category=c1)
        make_product(name="C", price="20.01", color="blue", category=c1)
        make_product(name="D", price="4.99", color="blue", category=c1)
        make_product(name="E", price="10.00", color="red", category=c1)
        make_product(name="F", price="10.00", color="blue", category=c2)

        res = client.get(f"/products?cat={c1}&minPrice=5&maxPrice=20&color=blu")
        assert res.status_code == 200
        found = {p["productId"] for p in res.get_json()}
        assert found == {match_a, match_b}

    def test_no_query_returns_all(self, client, make_product):
        ids = {make_product(name="A"), make_product(name="B")}
        res = client.get("/products")
        assert {p["productId"] for p in res.get_json()} == ids

    def test_bad_number_is_400(self, client):
        res = client.get("/products?minPrice=cheap")
        assert res.status_code == 400
        assert "minPrice" in res.get_json()["error"]

    @pytest.mark.parametrize(
        "query", ["minPrice=1e30", "maxPrice=1e30", "cat=99999999999999999999999"]
    )
    def test_oversized_number_is_400(self, client, query):
        res = client.get(f"/products?{query}")
        assert res.status_code == 400
        assert "error" in res.get_json()


# =============================================================================
# CATEGORIES
# =============================================================================


class TestCategories:
    def test_crud(self, client, admin):
        res = client.post(
            "/categories", json={"name": "Bags", "description": "Carry things"}, headers=admin["headers"]
        )
        assert res.status_code == 201
        cid = res.get_json()["categoryId"]

        res = client.put(f"/categories/{cid}", json={"name": "Luggage"}, headers=admin["headers"])
        assert res.status_code == 200
        assert res.get_json()["name"] == "Luggage"
        assert res.get_json()["description"] == "Carry things"

        assert client.delete(f"/categories/{cid}", headers=admin["headers"]).status_code == 204
        assert client.get(f"/categories/{cid}").status_code == 404

    def test_blank_name_rejected(self, client, admin):
        res = client.post("/categories", json={"name": "  "}, headers=admin["headers"])
        assert res.status_code == 400

    def test_delete_category_in_use_conflicts(self, client, admin, category_id, product_id):
        res = client.delete(f"/categories/{category_id}", headers=admin["headers"])
        assert res.status_code == 409
        assert client.get(f"/categories/{category_id}").status_code == 200

    def test_products_by_category(self, client, make_category, make_product):
        c1 = make_category("Shirts")
        c2 = make_category("Hats")
        shirt = make_product(name="Tee", category=c1)
        make_product(name="Cap", category=c2)

        res = client.get(f"/categories/{c1}/products")
        assert res.status_code == 200
        assert [p["productId"] for p in res.get_json()] == [shirt]

    def test_products_by_missing_category_404(self, client):
        assert client.get("/categories/9999/products").status_code == 404

    def test_unknown_route_is_json_404(self, client):
        res = client.get("/no-such-route")
        assert res.status_code == 404
        assert "error" in res.get_json()
