"""Domain events for the GroupOrder aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="GroupOrder")
class GroupOrderOpened:
    """A vendor opened a bulk-purchase offer on a supplier's product."""

    __version__ = 1

    group_order_id = Identifier(required=True)
    creator_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    product_id = Identifier(required=True)
    target_quantity = Float(required=True)
    unit_price = Float(required=True)
    discount_price = Float(required=True)
    deadline = DateTime(required=True)
    opened_at = DateTime(required=True)


@marketplace.event(part_of="GroupOrder")
class GroupOrderJoined:
    """A vendor committed a quantity to an open group order."""

    __version__ = 1

    group_order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    quantity = Float(required=True)
    current_quantity = Float(required=True)
    participant_count = Integer(required=True)
    joined_at = DateTime(required=True)


@marketplace.event(part_of="GroupOrder")
class GroupOrderCompleted:
    """Commitments reached the target quantity; the discount price is unlocked."""

    __version__ = 1

    group_order_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    product_id = Identifier(required=True)
    current_quantity = Float(required=True)
    target_quantity = Float(required=True)
    discount_price = Float(required=True)
    completed_at = DateTime(required=True)


@marketplace.event(part_of="GroupOrder")
class GroupOrderClosed:
    """An open group order was closed because its deadline had passed."""

    __version__ = 1

    group_order_id = Identifier(required=True)
    reason = String(required=True)
    current_quantity = Float(required=True)
    closed_at = DateTime(required=True)
