"""Tests for shop listing and product search."""

from search import SearchService


def signup_admin(client, shop, city):
    client.post("/signup", json={
        "userType": "admin",
        "adminName": shop,
        "shopName": shop,
        "city": city,
        "email": f"{shop.lower()}@example.com",
        "password": "pw",
    })
    res = client.post("/login", json={"userType": "admin", "email": f"{shop.lower()}@example.com", "password": "pw"})
    return res.json()["userId"]


def add_product(client, admin_id, name):
    client.post("/api/products", json={
        "name": name,
        "price": 50,
        "unit": "kg",
        "image": "https://img.example.com/p.png",
        "adminId": admin_id,
    })


class TestShops:
    def test_search_by_city_is_case_insensitive_substring(self, client):
        signup_admin(client, "Alpha", "Pune")
        signup_admin(client, "Beta", "Pimpri Pune")
        signup_admin(client, "Gamma", "Mumbai")
        shops = client.get("/api/shops/search", params={"city": "pune"}).json()
        assert sorted(s["shopName"] for s in shops) == ["Alpha", "Beta"]
        # raw records, password included
        assert shops[0]["password"] == "pw"

    def test_city_pattern_is_literal(self, client):
        signup_admin(client, "Alpha", "Pune")
        assert client.get("/api/shops/search", params={"city": "P.ne"}).json() == []

    def test_all_and_recent(self, client):
        for name in ["One", "Two", "Three", "Four"]:
            signup_admin(client, name, "Pune")
        assert len(client.get("/api/shops/all").json()) == 4
        recent = client.get("/api/shops/recent").json()
        assert [s["shopName"] for s in recent] == ["Four", "Three", "Two"]


class TestProductSearch:
    def test_single_matching_shop(self, client, admin):
        add_product(client, admin, "Basmati Rice")
        res = client.get("/api/products/search", params={"product": "rice", "city": "pune"})
        assert res.status_code == 200
        [group] = res.json()
        assert group["shopName"] == "Asha Kirana"
        assert group["city"] == "Pune"
        assert group["adminId"] == admin
        assert len(group["products"]) == 1
        assert group["products"][0]["name"] == "Basmati Rice"

    def test_shops_without_matching_products_are_excluded(self, client):
        rice_shop = signup_admin(client, "Alpha", "Pune")
        dal_shop = signup_admin(client, "Beta", "pune")
        mumbai_shop = signup_admin(client, "Gamma", "Mumbai")
        add_product(client, rice_shop, "Brown RICE")
        add_product(client, rice_shop, "Wheat Flour")
        add_product(client, dal_shop, "Toor Dal")
        add_product(client, mumbai_shop, "Basmati Rice")

        groups = client.get("/api/products/search", params={"product": "rice", "city": "pune"}).json()
        assert [g["shopName"] for g in groups] == ["Alpha"]
        assert [p["name"] for p in groups[0]["products"]] == ["Brown RICE"]

    def test_service_with_no_shops(self, store):
        assert SearchService(store).search_products("rice", "pune") == []
