"""Group order creation — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Text
from protean.utils.globals import current_domain

from marketplace.accounts.access import get_supplier, require_vendor
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.group_buying.group_order import GroupOrder

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="GroupOrder")
class CreateGroupOrder:
    creator_id = Identifier(required=True)  # the calling vendor
    supplier_id = Identifier(required=True)
    product_id = Identifier(required=True)
    target_quantity = Float(required=True)
    discount_price = Float(required=True)
    deadline = DateTime(required=True)
    delivery_address = Text(required=True)


@marketplace.command_handler(part_of=GroupOrder)
class CreateGroupOrderHandler:
    @handle(CreateGroupOrder)
    def create_group_order(self, command):
        creator = require_vendor(command.creator_id, "create group orders")
        supplier = get_supplier(command.supplier_id)

        product = current_domain.repository_for(Product).get(command.product_id)
        if not product.is_owned_by(supplier.id):
            raise ValidationError({"product_id": ["Product does not belong to the specified supplier"]})

        group_order = GroupOrder.open(
            creator_id=creator.id,
            supplier_id=supplier.id,
            product_id=product.id,
            unit_price=product.unit_price,
            target_quantity=command.target_quantity,
            discount_price=command.discount_price,
            deadline=command.deadline,
            delivery_address=command.delivery_address,
        )
        current_domain.repository_for(GroupOrder).add(group_order)

        logger.info(
            "Group order opened",
            group_order_id=str(group_order.id),
            creator_id=str(creator.id),
            product_id=str(product.id),
            target_quantity=group_order.target_quantity,
        )
        return str(group_order.id)
