"""Order placement — command and handler.

Validation runs against the stored products before anything is written.
The new order and every stock withdrawal it causes are committed together in
the handler's unit of work, so a rejected line leaves stock untouched.

Prices always come from the stored product. A ``unit_price`` sent with an
item is ignored.
"""

import json
from collections import OrderedDict

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.access import get_supplier, require_vendor
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.ordering.order import Order, OrderType

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    vendor_id = Identifier(required=True)  # the calling vendor
    supplier_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, quantity}]
    delivery_address = Text(required=True)
    order_type = String(choices=OrderType, default=OrderType.INDIVIDUAL.value)
    group_order_id = Identifier()
    notes = Text()


def _parse_items(raw):
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from None
    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["An order must contain at least one item"]})

    lines = []
    for position, item in enumerate(items):
        product_id = item.get("product_id") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None
        if not product_id:
            raise ValidationError({"items": [f"Item {position + 1} has no product"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int | float) or quantity <= 0:
            raise ValidationError({"items": [f"Item {position + 1} must have a quantity greater than 0"]})
        lines.append((str(product_id), quantity))
    return lines


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        vendor = require_vendor(command.vendor_id, "create orders")
        supplier = get_supplier(command.supplier_id)
        lines = _parse_items(command.items)

        product_repo = current_domain.repository_for(Product)

        # Load each product once; a product listed twice is checked on its combined quantity
        products = OrderedDict()
        requested = {}
        for product_id, quantity in lines:
            if product_id not in products:
                product = product_repo.get(product_id)
                if not product.is_owned_by(supplier.id):
                    raise ValidationError({"items": ["All items must be from the same supplier"]})
                products[product_id] = product
            products[product_id].check_minimum_order(quantity)
            requested[product_id] = requested.get(product_id, 0) + quantity

        for product_id, product in products.items():
            product.check_available(requested[product_id])

        order = Order.place(
            vendor_id=vendor.id,
            supplier_id=supplier.id,
            lines=[(product_id, quantity, products[product_id].unit_price) for product_id, quantity in lines],
            delivery_address=command.delivery_address,
            order_type=command.order_type,
            group_order_id=command.group_order_id,
            notes=command.notes,
        )

        for product_id, product in products.items():
            product.withdraw_stock(requested[product_id], order.id)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            vendor_id=str(vendor.id),
            supplier_id=str(supplier.id),
            total_amount=order.total_amount,
        )
        return str(order.id)
