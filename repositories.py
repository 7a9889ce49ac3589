"""
Entity repositories over the DataStore.

A repository is built from an explicit collection definition: the collection
name, its pydantic schema, the fields that must be present and truthy on
creation, and the reference fields stored as ObjectIds.
"""
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from bson.errors import InvalidId
from pydantic import BaseModel, ValidationError

from database import DataStore, object_id
from errors import InvalidField, MissingField, NotFound, StoreFailure
from logger import get_logger
from schemas import Admin, Customer, Order, Product

_logger = get_logger(__name__)

NEWEST_FIRST = [("_id", -1)]


def contains(pattern: Optional[str]) -> Dict[str, str]:
    """Case-insensitive substring filter for a user supplied pattern."""
    return {"$regex": re.escape(pattern or ""), "$options": "i"}


class Repository:
    label = "Record"

    def __init__(
        self,
        store: DataStore,
        collection: str,
        schema: Type[BaseModel],
        required: Sequence[str] = (),
        references: Sequence[str] = (),
    ):
        self.store = store
        self.collection = collection
        self.schema = schema
        self.required = tuple(required)
        self.references = tuple(references)

    def _refs(self, value: Any):
        try:
            return object_id(value)
        except InvalidId as e:
            _logger.warning(f"Malformed reference in {self.collection}: {value!r}")
            raise StoreFailure() from e

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        missing = [f for f in self.required if not fields.get(f)]
        if missing:
            raise MissingField("Missing required fields")
        values = {k: v for k, v in fields.items() if v is not None}
        try:
            doc = self.schema(**values).model_dump(exclude_none=True)
        except ValidationError as e:
            raise InvalidField(f"Invalid {self.label.lower()}: {e.errors()[0]['msg']}") from e
        for ref in self.references:
            if ref in doc:
                doc[ref] = self._refs(doc[ref])
        return self.store.insert(self.collection, doc)

    def find_by_id(self, id: Any, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        doc = self.store.find_by_id(self.collection, id, fields)
        if doc is None:
            raise NotFound(f"{self.label} not found")
        return doc

    def find_many(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        return self.store.find(self.collection, filter, sort=sort, limit=limit)


class CustomerRepository(Repository):
    label = "Customer"

    def __init__(self, store: DataStore):
        super().__init__(store, "customer", Customer)

    def find_by_credentials(self, email: Optional[str], password: Optional[str]) -> Optional[Dict[str, Any]]:
        return self.store.find_one(self.collection, {"email": email, "password": password})


class AdminRepository(Repository):
    label = "Admin"

    def __init__(self, store: DataStore):
        super().__init__(store, "admin", Admin)

    def find_by_credentials(self, email: Optional[str], password: Optional[str]) -> Optional[Dict[str, Any]]:
        return self.store.find_one(self.collection, {"email": email, "password": password})

    def search_by_city(self, city: Optional[str]) -> List[Dict[str, Any]]:
        return self.find_many({"city": contains(city)})

    def recent(self, limit: int = 3) -> List[Dict[str, Any]]:
        return self.find_many(sort=NEWEST_FIRST, limit=limit)


class ProductRepository(Repository):
    label = "Product"

    def __init__(self, store: DataStore):
        super().__init__(
            store,
            "product",
            Product,
            required=("name", "price", "unit", "image", "adminId"),
            references=("adminId",),
        )

    def for_admin(self, admin_id: Any) -> List[Dict[str, Any]]:
        return self.find_many({"adminId": self._refs(admin_id)})

    def search(self, admin_id: Any, name: Optional[str]) -> List[Dict[str, Any]]:
        return self.find_many({"adminId": self._refs(admin_id), "name": contains(name)})

    def delete(self, id: Any) -> bool:
        return self.store.delete_by_id(self.collection, id)


class OrderRepository(Repository):
    label = "Order"

    def __init__(self, store: DataStore):
        super().__init__(
            store,
            "order",
            Order,
            required=("customerId", "productName", "quantity", "unit", "adminId"),
            references=("adminId", "customerId"),
        )

    def for_admin(self, admin_id: Any, limit: int = 0) -> List[Dict[str, Any]]:
        sort = NEWEST_FIRST if limit else None
        return self.find_many({"adminId": self._refs(admin_id)}, sort=sort, limit=limit)

    def for_customer(self, customer_id: Any) -> List[Dict[str, Any]]:
        return self.find_many({"customerId": self._refs(customer_id)})

    def update_status(self, id: Any, status: Optional[str]) -> Optional[Dict[str, Any]]:
        changes = {} if status is None else {"status": status}
        return self.store.update_by_id(self.collection, id, changes)
