"""GroupOrder aggregate (CQRS) — vendors pooling demand for a bulk discount.

A vendor opens a group order on one supplier's product with a target
quantity, a discount price below the product's unit price and a deadline.
Other vendors commit quantities until the target is reached.

State Machine (3 states):
    OPEN → COMPLETED (commitments reach the target)
    OPEN → CLOSED    (a join is attempted after the deadline)
    COMPLETED, CLOSED → (terminal)

Expiry is lazy: nothing closes a group order until someone interacts with it
after its deadline. Capacity is checked against the product's live stock at
join time, and joining never withdraws stock or creates an Order.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.group_buying.events import (
    GroupOrderClosed,
    GroupOrderCompleted,
    GroupOrderJoined,
    GroupOrderOpened,
)
from marketplace.shared.errors import Conflict, Expired


class GroupOrderStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"


def as_utc(moment):
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@marketplace.entity(part_of="GroupOrder")
class Participation:
    """One vendor's commitment to a group order."""

    vendor_id = Identifier(required=True)
    quantity = Float(required=True)
    joined_at = DateTime(required=True)


@marketplace.aggregate
class GroupOrder:
    creator_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    product_id = Identifier(required=True)
    target_quantity = Float(required=True)
    current_quantity = Float(default=0.0)
    unit_price = Float(required=True)  # product price when the offer was opened
    discount_price = Float(required=True)
    participants = HasMany(Participation)
    status = String(choices=GroupOrderStatus, default=GroupOrderStatus.OPEN.value)
    deadline = DateTime(required=True)
    delivery_address = Text(required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def target_quantity_must_be_positive(self):
        if self.target_quantity is not None and self.target_quantity <= 0:
            raise ValidationError({"target_quantity": ["Target quantity must be greater than 0"]})

    @invariant.post
    def discount_price_must_undercut_unit_price(self):
        if self.discount_price is None or self.unit_price is None:
            return
        if self.discount_price <= 0:
            raise ValidationError({"discount_price": ["Discount price must be greater than 0"]})
        if self.discount_price >= self.unit_price:
            raise ValidationError({"discount_price": ["Discount price must be less than unit price"]})

    @invariant.post
    def vendor_joins_at_most_once(self):
        vendor_ids = [str(p.vendor_id) for p in self.participants]
        if len(vendor_ids) != len(set(vendor_ids)):
            raise ValidationError({"participants": ["A vendor can join a group order only once"]})

    @property
    def participant_ids(self):
        return [str(p.vendor_id) for p in self.participants]

    @property
    def is_open(self):
        return self.status == GroupOrderStatus.OPEN.value

    def has_participant(self, vendor_id) -> bool:
        return str(vendor_id) in self.participant_ids

    def involves(self, vendor_id) -> bool:
        """True when ``vendor_id`` created or joined this group order."""
        return str(self.creator_id) == str(vendor_id) or self.has_participant(vendor_id)

    def is_past_deadline(self, now=None) -> bool:
        return as_utc(self.deadline) <= (now or datetime.now(UTC))

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(
        cls,
        creator_id,
        supplier_id,
        product_id,
        unit_price,
        target_quantity,
        discount_price,
        deadline,
        delivery_address,
    ):
        now = datetime.now(UTC)
        deadline = as_utc(deadline)
        if deadline is None or deadline <= now:
            raise ValidationError({"deadline": ["Deadline must be in the future"]})

        group_order = cls(
            creator_id=creator_id,
            supplier_id=supplier_id,
            product_id=product_id,
            target_quantity=target_quantity,
            current_quantity=0.0,
            unit_price=unit_price,
            discount_price=discount_price,
            status=GroupOrderStatus.OPEN.value,
            deadline=deadline,
            delivery_address=delivery_address,
            created_at=now,
            updated_at=now,
        )
        group_order.raise_(
            GroupOrderOpened(
                group_order_id=str(group_order.id),
                creator_id=str(creator_id),
                supplier_id=str(supplier_id),
                product_id=str(product_id),
                target_quantity=target_quantity,
                unit_price=unit_price,
                discount_price=discount_price,
                deadline=deadline,
                opened_at=now,
            )
        )
        return group_order

    # -------------------------------------------------------------------
    # Joining
    # -------------------------------------------------------------------
    def ensure_open(self):
        if not self.is_open:
            raise Conflict("Group order is not open for joining")

    def join(self, vendor_id, quantity, available_quantity, unit=""):
        """Record ``vendor_id``'s commitment of ``quantity``.

        ``available_quantity`` is the product's current stock; the combined
        commitments may not exceed it.
        """
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than 0"]})
        self.ensure_open()
        if self.is_past_deadline():
            raise Expired("Group order deadline has passed")
        if self.has_participant(vendor_id):
            raise Conflict("You have already joined this group order")

        if self.current_quantity + quantity > available_quantity:
            remaining = max(available_quantity - self.current_quantity, 0)
            raise ValidationError(
                {"quantity": [f"Not enough product available. Available: {remaining:g} {unit}".rstrip()]}
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.add_participants(Participation(vendor_id=vendor_id, quantity=quantity, joined_at=now))
            self.current_quantity = self.current_quantity + quantity
            self.updated_at = now

        self.raise_(
            GroupOrderJoined(
                group_order_id=str(self.id),
                vendor_id=str(vendor_id),
                quantity=quantity,
                current_quantity=self.current_quantity,
                participant_count=len(self.participants),
                joined_at=now,
            )
        )

        if self.current_quantity >= self.target_quantity:
            self._complete(now)

    def _complete(self, now):
        self.status = GroupOrderStatus.COMPLETED.value
        self.updated_at = now

        self.raise_(
            GroupOrderCompleted(
                group_order_id=str(self.id),
                supplier_id=str(self.supplier_id),
                product_id=str(self.product_id),
                current_quantity=self.current_quantity,
                target_quantity=self.target_quantity,
                discount_price=self.discount_price,
                completed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Expiry
    # -------------------------------------------------------------------
    def close_expired(self):
        """Close an open group order whose deadline has passed."""
        if not self.is_open or not self.is_past_deadline():
            return

        now = datetime.now(UTC)
        self.status = GroupOrderStatus.CLOSED.value
        self.updated_at = now

        self.raise_(
            GroupOrderClosed(
                group_order_id=str(self.id),
                reason="Deadline passed",
                current_quantity=self.current_quantity,
                closed_at=now,
            )
        )
