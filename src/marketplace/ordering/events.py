"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A vendor placed an order with one supplier and stock was withdrawn."""

    __version__ = 1

    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, quantity, unit_price, total_price}]
    total_amount = Float(required=True)
    order_type = String(required=True)
    group_order_id = Identifier()
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The supplier moved an order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    vendor_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)
