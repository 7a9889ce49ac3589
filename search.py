"""
Shop and product search by city and name.
"""
from typing import Any, Dict, List, Optional

from database import DataStore, serialize
from repositories import AdminRepository, ProductRepository

RECENT_SHOPS = 3


class SearchService:
    def __init__(self, store: DataStore):
        self.admins = AdminRepository(store)
        self.products = ProductRepository(store)

    def search_shops(self, city: Optional[str]) -> List[Dict[str, Any]]:
        return [serialize(a) for a in self.admins.search_by_city(city)]

    def all_shops(self) -> List[Dict[str, Any]]:
        return [serialize(a) for a in self.admins.find_many()]

    def recent_shops(self, limit: int = RECENT_SHOPS) -> List[Dict[str, Any]]:
        return [serialize(a) for a in self.admins.recent(limit)]

    def search_products(self, product: Optional[str], city: Optional[str]) -> List[Dict[str, Any]]:
        results = []
        # one product query per matching admin, in admin order
        for admin in self.admins.search_by_city(city):
            products = self.products.search(admin["_id"], product)
            if products:
                results.append({
                    "shopName": admin.get("shopName"),
                    "city": admin.get("city"),
                    "adminId": str(admin["_id"]),
                    "products": [serialize(p) for p in products],
                })
        return results
