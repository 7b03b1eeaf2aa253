"""Read side — response DTOs assembled from the aggregates.

Aggregates are never mutated to enrich a response. Each DTO is a pydantic
model that serialises with camelCase keys, and related users and products are
looked up once per response through ``_Lookup``.
"""

from __future__ import annotations

from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from marketplace.accounts.access import get_supplier, require_supplier, require_vendor
from marketplace.accounts.user import User
from marketplace.catalogue.product import Product
from marketplace.group_buying.group_order import GroupOrder
from marketplace.ordering.order import Order
from marketplace.ratings.rating import Rating
from marketplace.shared.errors import Forbidden


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# --- DTOs ---


class UserProfile(CamelModel):
    id: str
    email: str
    name: str
    phone: str
    location: str
    role: str
    stall_name: str | None = None
    business_type: str | None = None
    rating: float | None = None
    total_ratings: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductView(CamelModel):
    id: str
    supplier_id: str
    name: str
    category: str
    description: str | None = None
    unit_price: float
    unit: str
    available_quantity: float
    minimum_order: float
    expiry_date: datetime | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductWithSupplier(ProductView):
    supplier: UserProfile | None = None


class OrderItemView(CamelModel):
    product_id: str
    quantity: float
    unit_price: float
    total_price: float
    product: ProductView | None = None


class OrderWithParties(CamelModel):
    id: str
    vendor_id: str
    supplier_id: str
    items: list[OrderItemView]
    total_amount: float
    status: str
    order_type: str
    group_order_id: str | None = None
    delivery_address: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    vendor: UserProfile | None = None
    supplier: UserProfile | None = None


class ParticipantView(CamelModel):
    vendor_id: str
    quantity: float
    joined_at: datetime
    vendor: UserProfile | None = None


class GroupOrderWithDetails(CamelModel):
    id: str
    creator_id: str
    supplier_id: str
    product_id: str
    target_quantity: float
    current_quantity: float
    unit_price: float
    discount_price: float
    participants: list[str]
    status: str
    deadline: datetime
    delivery_address: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: UserProfile | None = None
    supplier: UserProfile | None = None
    product: ProductView | None = None
    participant_details: list[ParticipantView] | None = None


class RatingWithParty(CamelModel):
    id: str
    vendor_id: str
    supplier_id: str
    order_id: str
    score: int = Field(alias="rating")
    comment: str | None = None
    created_at: datetime | None = None
    vendor: UserProfile | None = None
    supplier: UserProfile | None = None


# --- Assembly ---


class _Lookup:
    """Per-response cache of related aggregates; missing records map to None."""

    def __init__(self, aggregate_cls):
        self._repo = current_domain.repository_for(aggregate_cls)
        self._seen = {}

    def __call__(self, identifier):
        if identifier is None:
            return None
        key = str(identifier)
        if key not in self._seen:
            try:
                self._seen[key] = self._repo.get(key)
            except ObjectNotFoundError:
                self._seen[key] = None
        return self._seen[key]


def user_profile(user: User | None) -> UserProfile | None:
    if user is None:
        return None
    return UserProfile(
        id=str(user.id),
        email=user.email,
        name=user.name,
        phone=user.phone,
        location=user.location,
        role=user.role,
        stall_name=user.stall_name,
        business_type=user.business_type,
        rating=user.rating,
        total_ratings=user.total_ratings or 0,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _product_fields(product: Product) -> dict:
    return dict(
        id=str(product.id),
        supplier_id=str(product.supplier_id),
        name=product.name,
        category=product.category,
        description=product.description,
        unit_price=product.unit_price,
        unit=product.unit,
        available_quantity=product.available_quantity,
        minimum_order=product.minimum_order,
        expiry_date=product.expiry_date,
        image_url=product.image_url,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def product_view(product: Product | None) -> ProductView | None:
    if product is None:
        return None
    return ProductView(**_product_fields(product))


def product_with_supplier(product: Product, users: _Lookup) -> ProductWithSupplier:
    return ProductWithSupplier(**_product_fields(product), supplier=user_profile(users(product.supplier_id)))


def order_with_parties(order: Order, users: _Lookup, products: _Lookup) -> OrderWithParties:
    return OrderWithParties(
        id=str(order.id),
        vendor_id=str(order.vendor_id),
        supplier_id=str(order.supplier_id),
        items=[
            OrderItemView(
                product_id=str(item.product_id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                product=product_view(products(item.product_id)),
            )
            for item in order.items
        ],
        total_amount=order.total_amount,
        status=order.status,
        order_type=order.order_type,
        group_order_id=str(order.group_order_id) if order.group_order_id else None,
        delivery_address=order.delivery_address,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
        vendor=user_profile(users(order.vendor_id)),
        supplier=user_profile(users(order.supplier_id)),
    )


def group_order_with_details(
    group_order: GroupOrder, users: _Lookup, products: _Lookup, with_participants: bool = False
) -> GroupOrderWithDetails:
    participant_details = None
    if with_participants:
        participant_details = [
            ParticipantView(
                vendor_id=str(p.vendor_id),
                quantity=p.quantity,
                joined_at=p.joined_at,
                vendor=user_profile(users(p.vendor_id)),
            )
            for p in group_order.participants
        ]

    return GroupOrderWithDetails(
        id=str(group_order.id),
        creator_id=str(group_order.creator_id),
        supplier_id=str(group_order.supplier_id),
        product_id=str(group_order.product_id),
        target_quantity=group_order.target_quantity,
        current_quantity=group_order.current_quantity,
        unit_price=group_order.unit_price,
        discount_price=group_order.discount_price,
        participants=group_order.participant_ids,
        status=group_order.status,
        deadline=group_order.deadline,
        delivery_address=group_order.delivery_address,
        created_at=group_order.created_at,
        updated_at=group_order.updated_at,
        creator=user_profile(users(group_order.creator_id)),
        supplier=user_profile(users(group_order.supplier_id)),
        product=product_view(products(group_order.product_id)),
        participant_details=participant_details,
    )


def rating_with_party(rating: Rating, vendor: User | None = None, supplier: User | None = None) -> RatingWithParty:
    return RatingWithParty(
        id=str(rating.id),
        vendor_id=str(rating.vendor_id),
        supplier_id=str(rating.supplier_id),
        order_id=str(rating.order_id),
        score=rating.score,
        comment=rating.comment,
        created_at=rating.created_at,
        vendor=user_profile(vendor),
        supplier=user_profile(supplier),
    )


# --- Queries ---


def list_products(supplier_id=None, category=None) -> list[ProductWithSupplier]:
    users = _Lookup(User)
    products = current_domain.repository_for(Product).search(supplier_id=supplier_id, category=category)
    return [product_with_supplier(p, users) for p in products]


def get_product(product_id) -> ProductWithSupplier:
    product = current_domain.repository_for(Product).get(product_id)
    return product_with_supplier(product, _Lookup(User))


def supplier_products(caller: User) -> list[ProductView]:
    require_supplier(caller.id, "access this endpoint")
    return [product_view(p) for p in current_domain.repository_for(Product).for_supplier(caller.id)]


def list_orders(caller: User) -> list[OrderWithParties]:
    users, products = _Lookup(User), _Lookup(Product)
    orders = current_domain.repository_for(Order).visible_to(caller)
    return [order_with_parties(o, users, products) for o in orders]


def get_order(order_id, caller: User) -> OrderWithParties:
    order = current_domain.repository_for(Order).get(order_id)
    if not order.involves(caller.id):
        raise Forbidden("You can only view your own orders")
    return order_with_parties(order, _Lookup(User), _Lookup(Product))


def list_group_orders(status=None, supplier_id=None) -> list[GroupOrderWithDetails]:
    users, products = _Lookup(User), _Lookup(Product)
    group_orders = current_domain.repository_for(GroupOrder).listed(status=status, supplier_id=supplier_id)
    return [group_order_with_details(g, users, products) for g in group_orders]


def get_group_order(group_order_id) -> GroupOrderWithDetails:
    group_order = current_domain.repository_for(GroupOrder).get(group_order_id)
    return group_order_with_details(group_order, _Lookup(User), _Lookup(Product), with_participants=True)


def vendor_group_orders(caller: User) -> list[GroupOrderWithDetails]:
    require_vendor(caller.id, "access this endpoint")
    users, products = _Lookup(User), _Lookup(Product)
    group_orders = current_domain.repository_for(GroupOrder).for_vendor(caller.id)
    return [group_order_with_details(g, users, products) for g in group_orders]


def supplier_ratings(supplier_id) -> list[RatingWithParty]:
    """Ratings a supplier received, each with the rating vendor."""
    supplier = get_supplier(supplier_id)
    users = _Lookup(User)
    ratings = current_domain.repository_for(Rating).for_supplier(supplier.id)
    return [rating_with_party(r, vendor=users(r.vendor_id)) for r in ratings]


def vendor_ratings(caller: User) -> list[RatingWithParty]:
    """Ratings the calling vendor submitted, each with the rated supplier."""
    require_vendor(caller.id, "access this endpoint")
    users = _Lookup(User)
    ratings = current_domain.repository_for(Rating).by_vendor(caller.id)
    return [rating_with_party(r, supplier=users(r.supplier_id)) for r in ratings]


def get_rating(rating_id) -> RatingWithParty:
    rating = current_domain.repository_for(Rating).get(rating_id)
    users = _Lookup(User)
    return rating_with_party(rating, vendor=users(rating.vendor_id), supplier=users(rating.supplier_id))
