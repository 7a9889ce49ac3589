import os
from contextlib import contextmanager
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Dict, Any, Union

import auth
import database
from database import DataStore, get_store, serialize
from errors import MarketplaceError, StoreFailure
from logger import get_logger
from orders import OrderService
from repositories import ProductRepository
from search import SearchService

PORT = 3000

_logger = get_logger(__name__)

app = FastAPI(title="Dukaan API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------- Errors ----------------------

# Routes answering with a {"success", "message"} envelope, and the message
# they give on a store failure.
ENVELOPE_ROUTES = {
    "/login": "Server error",
    "/signup": "Error during signup",
}


def error_response(request: Request, status_code: int, message: str, store_failed: bool = False) -> JSONResponse:
    server_message = ENVELOPE_ROUTES.get(request.url.path)
    if server_message is None:
        return JSONResponse(status_code=status_code, content={"detail": message})
    if store_failed:
        message = server_message
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(MarketplaceError)
def marketplace_error(request: Request, exc: MarketplaceError):
    return error_response(request, exc.status_code, exc.message, isinstance(exc, StoreFailure))


@app.exception_handler(RequestValidationError)
def invalid_body(request: Request, exc: RequestValidationError):
    _logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return error_response(request, 400, "Invalid request body")


@contextmanager
def failure_message(message: str):
    """Give store failures raised inside the block a route specific message."""
    try:
        yield
    except StoreFailure as e:
        raise StoreFailure(message) from e


# ---------------------- Schemas ----------------------

class LoginReq(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    userType: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignupReq(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    userType: Optional[str] = None
    name: Optional[str] = None
    adminName: Optional[str] = None
    shopName: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    mobile: Optional[str] = None
    photo: Optional[str] = None


class ProductIn(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    unit: Optional[str] = None
    image: Optional[str] = None
    adminId: Optional[str] = None
    quantity: Optional[Union[int, float]] = None


class OrderIn(BaseModel):
    customerId: Optional[str] = None
    productName: Optional[str] = None
    quantity: Optional[Union[int, float]] = None
    unit: Optional[str] = None
    adminId: Optional[str] = None


class StatusIn(BaseModel):
    status: Optional[str] = None


# ---------------------- Root & Health ----------------------

@app.get("/", response_class=PlainTextResponse)
def read_root():
    return "Dukaan Backend is Running!"


@app.get("/test")
def test_database():
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": "Set" if (os.getenv("DATABASE_URL") or os.getenv("MONGODB_URI")) else "Not Set",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    if database.db is None:
        response["database"] = "Not configured"
        return response
    try:
        store = get_store()
        response["database_name"] = store.database.name
        response["collections"] = store.collection_names()[:10]
        response["database"] = "Connected & Working"
        response["connection_status"] = "Connected"
    except StoreFailure as e:
        response["database"] = f"Error: {e.message}"
    return response


# ---------------------- Auth ----------------------

@app.post("/login")
def login(body: LoginReq, store: DataStore = Depends(get_store)):
    return auth.login(store, body.userType, body.email, body.password)


@app.post("/signup")
def signup(body: SignupReq, store: DataStore = Depends(get_store)):
    fields = body.model_dump(exclude={"userType"}, exclude_none=True)
    return auth.signup(store, body.userType, fields)


@app.get("/api/admin/profile/{admin_id}")
def admin_profile(admin_id: str, store: DataStore = Depends(get_store)) -> Dict[str, Any]:
    with failure_message("Error fetching admin profile"):
        return auth.admin_profile(store, admin_id)


@app.get("/api/customer/profile/{customer_id}")
def customer_profile(customer_id: str, store: DataStore = Depends(get_store)) -> Dict[str, Any]:
    with failure_message("Error fetching customer profile"):
        return auth.customer_profile(store, customer_id)


# ---------------------- Products ----------------------

@app.post("/api/products")
def create_product(product: ProductIn, store: DataStore = Depends(get_store)) -> Dict[str, Any]:
    with failure_message("Error adding product"):
        created = ProductRepository(store).create(product.model_dump())
    _logger.info(f"Product {created['_id']} added by admin {product.adminId}")
    return serialize(created)


@app.get("/api/products/search")
def search_products(
    product: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    store: DataStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    with failure_message("Error fetching product search"):
        return SearchService(store).search_products(product, city)


@app.get("/api/products/admin/{admin_id}")
def admin_products(admin_id: str, store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching products"):
        return [serialize(p) for p in ProductRepository(store).for_admin(admin_id)]


@app.delete("/api/products/{product_id}")
def delete_product(product_id: str, store: DataStore = Depends(get_store)) -> Dict[str, str]:
    with failure_message("Error deleting product"):
        if ProductRepository(store).delete(product_id):
            _logger.info(f"Product {product_id} deleted")
    return {"message": "Product deleted"}


# ---------------------- Orders ----------------------

@app.get("/api/orders/admin/{admin_id}")
def admin_orders(admin_id: str, store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching orders"):
        return OrderService(store).admin_orders(admin_id)


@app.get("/api/orders/admin/{admin_id}/recent")
def recent_admin_orders(admin_id: str, store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching recent orders"):
        return OrderService(store).recent_admin_orders(admin_id)


@app.put("/api/orders/{order_id}")
def update_order_status(order_id: str, body: StatusIn, store: DataStore = Depends(get_store)) -> Optional[Dict[str, Any]]:
    with failure_message("Error updating order status"):
        return OrderService(store).update_status(order_id, body.status)


@app.post("/api/orders")
def place_order(order: OrderIn, store: DataStore = Depends(get_store)) -> Dict[str, Any]:
    with failure_message("Error placing order"):
        return OrderService(store).place_order(
            order.customerId, order.productName, order.quantity, order.unit, order.adminId
        )


@app.get("/api/customer/orders/{customer_id}")
def customer_orders(customer_id: str, store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching orders"):
        return OrderService(store).customer_orders(customer_id)


# ---------------------- Shops ----------------------

@app.get("/api/shops/search")
def search_shops(city: Optional[str] = Query(None), store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error searching shops"):
        return SearchService(store).search_shops(city)


@app.get("/api/shops/all")
def all_shops(store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching shops"):
        return SearchService(store).all_shops()


@app.get("/api/shops/recent")
def recent_shops(store: DataStore = Depends(get_store)) -> List[Dict[str, Any]]:
    with failure_message("Error fetching recent shops"):
        return SearchService(store).recent_shops()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
