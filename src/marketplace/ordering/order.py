"""Order aggregate (CQRS) — a vendor's purchase from a single supplier.

Line items are priced from the stored product at placement time and never
change afterwards. Only the order's supplier moves it through the state
machine.

State Machine (6 states):
    PENDING → CONFIRMED → PREPARING → READY → DELIVERED
    PENDING → CANCELLED
    DELIVERED, CANCELLED → (terminal)

Transitions go forward only. Intermediate states may be skipped (a supplier
can mark a pending order delivered in one step).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.ordering.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderType(Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_FULFILMENT_CHAIN = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
]

_VALID_TRANSITIONS = {
    status: set(_FULFILMENT_CHAIN[position + 1 :]) for position, status in enumerate(_FULFILMENT_CHAIN)
}
_VALID_TRANSITIONS[OrderStatus.PENDING].add(OrderStatus.CANCELLED)
_VALID_TRANSITIONS[OrderStatus.CANCELLED] = set()

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """One product and quantity within an order, with its price snapshot."""

    product_id = Identifier(required=True)
    quantity = Float(required=True)
    unit_price = Float(required=True)
    total_price = Float(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    vendor_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    order_type = String(choices=OrderType, default=OrderType.INDIVIDUAL.value)
    group_order_id = Identifier()
    delivery_address = Text(required=True)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_matches_line_items(self):
        expected = sum(item.total_price for item in self.items)
        if abs((self.total_amount or 0.0) - expected) > 1e-6:
            raise ValidationError({"total_amount": ["Total amount must equal the sum of line totals"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        vendor_id,
        supplier_id,
        lines,
        delivery_address,
        order_type=None,
        group_order_id=None,
        notes=None,
    ):
        """Create a pending order.

        Args:
            lines: Iterable of ``(product_id, quantity, unit_price)`` tuples,
                with the unit price taken from the stored product.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            vendor_id=vendor_id,
            supplier_id=supplier_id,
            status=OrderStatus.PENDING.value,
            order_type=order_type or OrderType.INDIVIDUAL.value,
            group_order_id=group_order_id,
            delivery_address=delivery_address,
            notes=notes,
            total_amount=0.0,
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for product_id, quantity, unit_price in lines:
                order.add_items(
                    OrderItem(
                        product_id=product_id,
                        quantity=quantity,
                        unit_price=unit_price,
                        total_price=quantity * unit_price,
                    )
                )
            order.total_amount = sum(item.total_price for item in order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                vendor_id=str(vendor_id),
                supplier_id=str(supplier_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                            "total_price": item.total_price,
                        }
                        for item in order.items
                    ]
                ),
                total_amount=order.total_amount,
                order_type=order.order_type,
                group_order_id=str(group_order_id) if group_order_id else None,
                placed_at=now,
            )
        )
        return order

    def involves(self, user_id) -> bool:
        """True when ``user_id`` is the order's vendor or supplier."""
        return str(user_id) in (str(self.vendor_id), str(self.supplier_id))

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def change_status(self, status):
        """Move the order to ``status``. Setting the current status again is a no-op."""
        current = OrderStatus(self.status)
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": ["Invalid status"]}) from None
        if target == current:
            return

        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                vendor_id=str(self.vendor_id),
                supplier_id=str(self.supplier_id),
                previous_status=current.value,
                status=target.value,
                changed_at=now,
            )
        )
