"""Pydantic request/response schemas for the marketplace API.

Request bodies accept camelCase keys (``unitPrice``) as well as the
snake_case field names. Every response uses the ``ApiResponse`` envelope.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Envelope ---


class ApiResponse(BaseModel):
    success: bool = True
    data: Any = None
    message: str | None = None
    error: str | None = None


def ok(data=None, message=None) -> dict:
    return ApiResponse(data=data, message=message).model_dump(exclude_none=True)


# --- Account ---


class RegisterRequest(CamelRequest):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "email": "ravi@example.com",
                    "name": "Ravi Patel",
                    "phone": "+91 9876543212",
                    "location": "Mumbai, Maharashtra",
                    "role": "vendor",
                    "stallName": "Ravi's Chat Corner",
                }
            ]
        },
    )

    email: str = Field(..., max_length=254)
    name: str = Field(..., max_length=150)
    phone: str = Field(..., max_length=30)
    location: str = Field(..., max_length=255)
    role: str
    stall_name: str | None = Field(None, max_length=150)
    business_type: str | None = None


class UpdateProfileRequest(CamelRequest):
    name: str | None = Field(None, max_length=150)
    phone: str | None = Field(None, max_length=30)
    location: str | None = Field(None, max_length=255)
    stall_name: str | None = Field(None, max_length=150)
    business_type: str | None = None


# --- Catalogue ---


class CreateProductRequest(CamelRequest):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Fresh Tomatoes",
                    "category": "Vegetables",
                    "description": "Fresh red tomatoes, perfect for chutneys and curries",
                    "unitPrice": 25,
                    "unit": "kg",
                    "availableQuantity": 500,
                    "minimumOrder": 10,
                }
            ]
        },
    )

    name: str = Field(..., max_length=255)
    category: str = Field(..., max_length=100)
    description: str | None = None
    unit_price: float
    unit: str = Field(..., max_length=20)
    available_quantity: float
    minimum_order: float | None = None
    expiry_date: datetime | None = None
    image_url: str | None = Field(None, max_length=500)


class UpdateProductRequest(CamelRequest):
    name: str | None = Field(None, max_length=255)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    unit_price: float | None = None
    unit: str | None = Field(None, max_length=20)
    available_quantity: float | None = None
    minimum_order: float | None = None
    expiry_date: datetime | None = None
    image_url: str | None = Field(None, max_length=500)


# --- Ordering ---


class OrderItemRequest(CamelRequest):
    product_id: str
    quantity: float
    unit_price: float | None = None  # ignored, the stored price applies


class CreateOrderRequest(CamelRequest):
    supplier_id: str
    items: list[OrderItemRequest]
    delivery_address: str
    order_type: str = "individual"
    group_order_id: str | None = None
    notes: str | None = None


class UpdateOrderStatusRequest(CamelRequest):
    status: str


# --- Group buying ---


class CreateGroupOrderRequest(CamelRequest):
    supplier_id: str
    product_id: str
    target_quantity: float
    discount_price: float
    deadline: datetime
    delivery_address: str


class JoinGroupOrderRequest(CamelRequest):
    quantity: float


# --- Ratings ---


class CreateRatingRequest(CamelRequest):
    order_id: str
    supplier_id: str
    rating: int
    comment: str | None = None
