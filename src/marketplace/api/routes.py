"""FastAPI endpoints for the marketplace.

Routes translate requests into commands or read-side queries and wrap the
result in the ``ApiResponse`` envelope. Role and ownership checks live in the
command handlers and views, not here.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace import views
from marketplace.accounts.profile import UpdateProfile
from marketplace.accounts.registration import RegisterUser
from marketplace.accounts.user import User
from marketplace.api.auth import current_caller
from marketplace.api.schemas import (
    CreateGroupOrderRequest,
    CreateOrderRequest,
    CreateProductRequest,
    CreateRatingRequest,
    JoinGroupOrderRequest,
    RegisterRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateProfileRequest,
    ok,
)
from marketplace.catalogue.creation import CreateProduct
from marketplace.catalogue.maintenance import DeleteProduct, UpdateProduct
from marketplace.group_buying.creation import CreateGroupOrder
from marketplace.group_buying.joining import join_group_order as join_group
from marketplace.ordering.placement import PlaceOrder
from marketplace.ordering.status import UpdateOrderStatus
from marketplace.ratings.submission import SubmitRating

auth_router = APIRouter(prefix="/auth", tags=["auth"])
product_router = APIRouter(prefix="/products", tags=["products"])
supplier_router = APIRouter(prefix="/supplier", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
group_order_router = APIRouter(prefix="/group-orders", tags=["group-orders"])
vendor_router = APIRouter(prefix="/vendor", tags=["group-orders"])
rating_router = APIRouter(prefix="/ratings", tags=["ratings"])


def _profile(user_id):
    return views.user_profile(current_domain.repository_for(User).get(user_id)).dump()


# --- Account ---


@auth_router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    command = RegisterUser(
        email=body.email,
        name=body.name,
        phone=body.phone,
        location=body.location,
        role=body.role,
        stall_name=body.stall_name,
        business_type=body.business_type,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return ok(_profile(user_id), "Registration successful")


@auth_router.get("/profile")
async def get_profile(caller: User = Depends(current_caller)):
    return ok(views.user_profile(caller).dump())


@auth_router.put("/profile")
async def update_profile(body: UpdateProfileRequest, caller: User = Depends(current_caller)):
    command = UpdateProfile(
        user_id=caller.id,
        name=body.name,
        phone=body.phone,
        location=body.location,
        stall_name=body.stall_name,
        business_type=body.business_type,
    )
    current_domain.process(command, asynchronous=False)
    return ok(_profile(caller.id), "Profile updated successfully")


# --- Catalogue ---


@product_router.get("")
async def list_products(supplier_id: str | None = Query(None, alias="supplierId"), category: str | None = None):
    return ok([p.dump() for p in views.list_products(supplier_id=supplier_id, category=category)])


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    return ok(views.get_product(product_id).dump())


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, caller: User = Depends(current_caller)):
    command = CreateProduct(
        supplier_id=caller.id,
        name=body.name,
        category=body.category,
        description=body.description,
        unit_price=body.unit_price,
        unit=body.unit,
        available_quantity=body.available_quantity,
        minimum_order=body.minimum_order,
        expiry_date=body.expiry_date,
        image_url=body.image_url,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ok(views.get_product(product_id).dump(), "Product created successfully")


@product_router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, caller: User = Depends(current_caller)):
    command = UpdateProduct(
        supplier_id=caller.id,
        product_id=product_id,
        **body.model_dump(exclude_none=True),
    )
    current_domain.process(command, asynchronous=False)
    return ok(views.get_product(product_id).dump(), "Product updated successfully")


@product_router.delete("/{product_id}")
async def delete_product(product_id: str, caller: User = Depends(current_caller)):
    current_domain.process(DeleteProduct(supplier_id=caller.id, product_id=product_id), asynchronous=False)
    return ok(message="Product deleted successfully")


@supplier_router.get("/products")
async def supplier_products(caller: User = Depends(current_caller)):
    return ok([p.dump() for p in views.supplier_products(caller)])


# --- Ordering ---


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, caller: User = Depends(current_caller)):
    command = PlaceOrder(
        vendor_id=caller.id,
        supplier_id=body.supplier_id,
        items=json.dumps([{"product_id": item.product_id, "quantity": item.quantity} for item in body.items]),
        delivery_address=body.delivery_address,
        order_type=body.order_type,
        group_order_id=body.group_order_id,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return ok(views.get_order(order_id, caller).dump(), "Order created successfully")


@order_router.get("")
async def list_orders(caller: User = Depends(current_caller)):
    return ok([o.dump() for o in views.list_orders(caller)])


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: User = Depends(current_caller)):
    return ok(views.get_order(order_id, caller).dump())


@order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, caller: User = Depends(current_caller)):
    command = UpdateOrderStatus(supplier_id=caller.id, order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return ok(views.get_order(order_id, caller).dump(), "Order status updated successfully")


# --- Group buying ---


@group_order_router.post("", status_code=201)
async def create_group_order(body: CreateGroupOrderRequest, caller: User = Depends(current_caller)):
    command = CreateGroupOrder(
        creator_id=caller.id,
        supplier_id=body.supplier_id,
        product_id=body.product_id,
        target_quantity=body.target_quantity,
        discount_price=body.discount_price,
        deadline=body.deadline,
        delivery_address=body.delivery_address,
    )
    group_order_id = current_domain.process(command, asynchronous=False)
    return ok(views.get_group_order(group_order_id).dump(), "Group order created successfully")


@group_order_router.get("")
async def list_group_orders(status: str | None = None, supplier_id: str | None = Query(None, alias="supplierId")):
    return ok([g.dump() for g in views.list_group_orders(status=status, supplier_id=supplier_id)])


@group_order_router.get("/{group_order_id}")
async def get_group_order(group_order_id: str):
    return ok(views.get_group_order(group_order_id).dump())


@group_order_router.post("/{group_order_id}/join")
async def join_group_order(group_order_id: str, body: JoinGroupOrderRequest, caller: User = Depends(current_caller)):
    join_group(caller.id, group_order_id, body.quantity)
    return ok(views.get_group_order(group_order_id).dump(), "Successfully joined group order")


@vendor_router.get("/group-orders")
async def vendor_group_orders(caller: User = Depends(current_caller)):
    return ok([g.dump() for g in views.vendor_group_orders(caller)])


# --- Ratings ---


@rating_router.post("", status_code=201)
async def create_rating(body: CreateRatingRequest, caller: User = Depends(current_caller)):
    command = SubmitRating(
        vendor_id=caller.id,
        order_id=body.order_id,
        supplier_id=body.supplier_id,
        score=body.rating,
        comment=body.comment,
    )
    rating_id = current_domain.process(command, asynchronous=False)
    return ok(views.get_rating(rating_id).dump(), "Rating submitted successfully")


@rating_router.get("/supplier/{supplier_id}")
async def supplier_ratings(supplier_id: str):
    return ok([r.dump() for r in views.supplier_ratings(supplier_id)])


@rating_router.get("/vendor")
async def vendor_ratings(caller: User = Depends(current_caller)):
    return ok([r.dump() for r in views.vendor_ratings(caller)])
