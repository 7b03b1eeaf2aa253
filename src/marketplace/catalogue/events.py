"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A supplier added a product to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    unit_price = Float(required=True)
    unit = String(required=True)
    available_quantity = Float(required=True)
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductUpdated:
    """A supplier edited a product's details, price or stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON array of field names
    unit_price = Float(required=True)
    available_quantity = Float(required=True)
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class StockWithdrawn:
    """Stock was taken out of a product's available quantity by an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_quantity = Float(required=True)
    available_quantity = Float(required=True)
    withdrawn_at = DateTime(required=True)
