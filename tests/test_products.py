"""Tests for product catalog routes and the product repository."""

import pytest

from errors import InvalidField, MissingField
from repositories import ProductRepository

PRODUCT = {
    "name": "Basmati Rice",
    "price": 120,
    "unit": "kg",
    "image": "https://img.example.com/rice.png",
}


class TestCreateProduct:
    def test_quantity_defaults_to_one(self, client, admin):
        res = client.post("/api/products", json={**PRODUCT, "adminId": admin})
        assert res.status_code == 200
        body = res.json()
        assert body["quantity"] == 1
        assert body["adminId"] == admin
        assert body["name"] == "Basmati Rice"
        assert "id" in body

    @pytest.mark.parametrize("field", ["name", "price", "unit", "image", "adminId"])
    def test_missing_required_field(self, client, admin, field):
        payload = {**PRODUCT, "adminId": admin}
        del payload[field]
        res = client.post("/api/products", json=payload)
        assert res.status_code == 400

    def test_negative_price_rejected(self, store, admin):
        with pytest.raises(InvalidField):
            ProductRepository(store).create({**PRODUCT, "price": -5, "adminId": admin})

    def test_zero_price_counts_as_missing(self, store, admin):
        with pytest.raises(MissingField):
            ProductRepository(store).create({**PRODUCT, "price": 0, "adminId": admin})


class TestListAndDelete:
    def test_products_by_admin(self, client, admin):
        client.post("/api/products", json={**PRODUCT, "adminId": admin})
        client.post("/api/products", json={**PRODUCT, "name": "Toor Dal", "adminId": admin, "quantity": 2})
        products = client.get(f"/api/products/admin/{admin}").json()
        assert sorted(p["name"] for p in products) == ["Basmati Rice", "Toor Dal"]

    def test_delete(self, client, admin):
        created = client.post("/api/products", json={**PRODUCT, "adminId": admin}).json()
        res = client.delete(f"/api/products/{created['id']}")
        assert res.json() == {"message": "Product deleted"}
        assert client.get(f"/api/products/admin/{admin}").json() == []

    def test_delete_unknown_product_still_succeeds(self, client):
        res = client.delete("/api/products/64b7f0c2e4b0a1a2b3c4d5e6")
        assert res.status_code == 200

    def test_malformed_admin_id(self, client):
        res = client.get("/api/products/admin/xyz")
        assert res.status_code == 500
        assert res.json() == {"detail": "Error fetching products"}


class TestRequestBody:
    def test_wrongly_typed_field(self, client, admin):
        res = client.post("/api/products", json={**PRODUCT, "price": "cheap", "adminId": admin})
        assert res.status_code == 400
        assert res.json() == {"detail": "Invalid request body"}

    def test_integer_quantity_round_trips(self, client, admin):
        body = client.post("/api/products", json={**PRODUCT, "adminId": admin, "quantity": 5}).json()
        assert body["quantity"] == 5
        assert isinstance(body["quantity"], int)
