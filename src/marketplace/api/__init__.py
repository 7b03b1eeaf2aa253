"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import (
    auth_router,
    group_order_router,
    order_router,
    product_router,
    rating_router,
    supplier_router,
    vendor_router,
)

routers = [
    auth_router,
    product_router,
    supplier_router,
    order_router,
    group_order_router,
    vendor_router,
    rating_router,
]

__all__ = ["routers", "register_error_handlers"]
