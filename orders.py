"""
Order lookup and enrichment.

Orders reference their Customer and Admin by id. Each view resolves those
references in one lookup per list and copies a few fields of the referenced
record onto every order, with fixed fallbacks when the reference no longer
resolves.

Status is a plain string. Pending, Ready to Pickup, Completed and Cancelled
are the values the clients use, but any value is stored and any status can
move to any other.
"""
from typing import Any, Dict, List, Optional

from database import DataStore, serialize
from errors import MissingField
from logger import get_logger
from repositories import CustomerRepository, OrderRepository

_logger = get_logger(__name__)

RECENT_ORDERS = 5


class OrderService:
    def __init__(self, store: DataStore):
        self.store = store
        self.orders = OrderRepository(store)
        self.customers = CustomerRepository(store)

    def _with_customer(self, orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        customers = self.store.populate(orders, "customerId", "customer", ["name", "email"])
        enriched = []
        for order in orders:
            customer = customers.get(order.get("customerId"))
            view = serialize(order)
            view["customerName"] = customer.get("name") if customer and customer.get("name") else "Unknown"
            view["customerEmail"] = customer.get("email") if customer and customer.get("email") else "N/A"
            enriched.append(view)
        return enriched

    def admin_orders(self, admin_id: str) -> List[Dict[str, Any]]:
        return self._with_customer(self.orders.for_admin(admin_id))

    def recent_admin_orders(self, admin_id: str, limit: int = RECENT_ORDERS) -> List[Dict[str, Any]]:
        return self._with_customer(self.orders.for_admin(admin_id, limit=limit))

    def customer_orders(self, customer_id: str) -> List[Dict[str, Any]]:
        orders = self.orders.for_customer(customer_id)
        shops = self.store.populate(orders, "adminId", "admin", ["shopName", "city"])
        enriched = []
        for order in orders:
            shop = shops.get(order.get("adminId"))
            enriched.append({
                "id": str(order["_id"]),
                "productName": order.get("productName"),
                "quantity": order.get("quantity"),
                "unit": order.get("unit"),
                "status": order.get("status"),
                "adminId": str(shop["_id"]) if shop else None,
                "shopName": shop.get("shopName") if shop and shop.get("shopName") else "Unknown Shop",
                "city": shop.get("city") if shop and shop.get("city") else "Unknown City",
            })
        return enriched

    def place_order(
        self,
        customer_id: Optional[str],
        product_name: Optional[str],
        quantity: Any,
        unit: Optional[str],
        admin_id: Optional[str],
    ) -> Dict[str, Any]:
        if not all((customer_id, product_name, quantity, unit, admin_id)):
            raise MissingField("Missing fields")
        # No transaction: the customer may be deleted between these two calls.
        customer = self.customers.find_by_id(customer_id)
        order = self.orders.create({
            "customerId": customer_id,
            "customerName": customer.get("name"),
            "productName": product_name,
            "quantity": quantity,
            "unit": unit,
            "adminId": admin_id,
        })
        _logger.info(f"Order {order['_id']} placed by customer {customer_id} with admin {admin_id}")
        return {"success": True, "message": "Order placed successfully"}

    def update_status(self, order_id: str, status: Optional[str]) -> Optional[Dict[str, Any]]:
        updated = self.orders.update_status(order_id, status)
        if updated is not None and status is not None:
            _logger.info(f"Order {order_id} status set to {status!r}")
        return serialize(updated)
