"""
Database Schemas for Dukaan (local marketplace)

Each Pydantic model represents a collection in MongoDB. The collection
name is the lowercase of the class name (e.g., Product -> "product").
Reference fields (adminId, customerId) are declared as strings here and
stored as ObjectIds by the repositories.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union


ORDER_STATUSES = ("Pending", "Ready to Pickup", "Completed", "Cancelled")


class Customer(BaseModel):
    """
    Customers collection schema
    Collection: "customer"
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = Field(None, description="Login key, not unique")
    password: Optional[str] = Field(None, description="Plain text password")
    mobile: Optional[str] = None


class Admin(BaseModel):
    """
    Shop admins (merchants) collection schema
    Collection: "admin"
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    adminName: Optional[str] = None
    shopName: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = Field(None, description="Login key, not unique")
    password: Optional[str] = Field(None, description="Plain text password")
    mobile: Optional[str] = None
    photo: str = Field("", description="Photo URI")


class Product(BaseModel):
    """
    Products collection schema
    Collection: "product"
    """
    name: str = Field(..., description="Product name")
    price: float = Field(..., ge=0, description="Unit price")
    unit: str = Field(..., description="Selling unit, e.g. kg")
    image: str = Field(..., description="Image URI")
    quantity: Union[int, float] = Field(1, description="Quantity per unit")
    adminId: str = Field(..., description="Owning admin")


class Order(BaseModel):
    """
    Orders collection schema
    Collection: "order"
    """
    customerName: Optional[str] = Field(None, description="Customer name when the order was placed")
    productName: str
    quantity: Union[int, float]
    unit: str
    status: str = Field("Pending", description="Pending | Ready to Pickup | Completed | Cancelled")
    adminId: str
    customerId: str
