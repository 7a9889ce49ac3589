"""
Login, signup and profile lookups for the two account roles.

Credentials are compared as stored. A failed login is an ordinary result
({"success": False, ...}), not an error.
"""
from typing import Any, Dict, Optional

from database import DataStore
from errors import InvalidRole
from logger import get_logger
from repositories import AdminRepository, CustomerRepository
from schemas import Admin, Customer

_logger = get_logger(__name__)

ROLES = ("customer", "admin")


def _repository(store: DataStore, user_type: Optional[str]):
    if user_type == "customer":
        return CustomerRepository(store)
    if user_type == "admin":
        return AdminRepository(store)
    raise InvalidRole()


def login(store: DataStore, user_type: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    repo = _repository(store, user_type)
    if email is None or password is None:
        return {"success": False, "message": f"Invalid {user_type} credentials"}
    user = repo.find_by_credentials(email, password)
    if not user:
        _logger.info(f"Failed {user_type} login for {email!r}")
        return {"success": False, "message": f"Invalid {user_type} credentials"}
    return {"success": True, "userId": str(user["_id"]), "role": user_type}


def signup(store: DataStore, user_type: Optional[str], fields: Dict[str, Any]) -> Dict[str, Any]:
    repo = _repository(store, user_type)
    allowed = Customer.model_fields if user_type == "customer" else Admin.model_fields
    created = repo.create({k: v for k, v in fields.items() if k in allowed})
    _logger.info(f"Registered {user_type} {created['_id']}")
    return {"success": True, "message": f"{user_type.capitalize()} registered successfully"}


def admin_profile(store: DataStore, admin_id: str) -> Dict[str, Any]:
    admin = AdminRepository(store).find_by_id(admin_id)
    return {
        "name": admin.get("adminName"),
        "shopName": admin.get("shopName"),
        "email": admin.get("email"),
        "city": admin.get("city"),
        "mobile": admin.get("mobile"),
        "photo": admin.get("photo"),
    }


def customer_profile(store: DataStore, customer_id: str) -> Dict[str, Any]:
    customer = CustomerRepository(store).find_by_id(customer_id)
    return {
        "name": customer.get("name"),
        "city": customer.get("city"),
        "email": customer.get("email"),
        "mobile": customer.get("mobile"),
    }
