"""Joining a group order — commands, handler and the join entry point.

An open group order whose deadline has passed is closed the first time
someone tries to join it. The join itself fails with ``Expired`` and its unit
of work rolls back, so the close is processed afterwards as a separate
``CloseExpiredGroupOrder`` command. Callers join through
``join_group_order``, which does both.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from marketplace.accounts.access import require_vendor
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.group_buying.group_order import GroupOrder
from marketplace.shared.errors import Conflict, Expired

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="GroupOrder")
class JoinGroupOrder:
    vendor_id = Identifier(required=True)  # the calling vendor
    group_order_id = Identifier(required=True)
    quantity = Float(required=True)


@marketplace.command(part_of="GroupOrder")
class CloseExpiredGroupOrder:
    group_order_id = Identifier(required=True)


@marketplace.command_handler(part_of=GroupOrder)
class JoinGroupOrderHandler:
    @handle(JoinGroupOrder)
    def join_group_order(self, command):
        vendor = require_vendor(command.vendor_id, "join group orders")
        if command.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than 0"]})

        repo = current_domain.repository_for(GroupOrder)
        group_order = repo.get(command.group_order_id)
        group_order.ensure_open()

        if group_order.is_past_deadline():
            raise Expired("Group order deadline has passed")

        if group_order.has_participant(vendor.id):
            raise Conflict("You have already joined this group order")

        product = current_domain.repository_for(Product).get(group_order.product_id)
        group_order.join(vendor.id, command.quantity, product.available_quantity, product.unit)
        repo.add(group_order)

        logger.info(
            "Group order joined",
            group_order_id=str(group_order.id),
            vendor_id=str(vendor.id),
            quantity=command.quantity,
            current_quantity=group_order.current_quantity,
            status=group_order.status,
        )
        return str(group_order.id)

    @handle(CloseExpiredGroupOrder)
    def close_expired_group_order(self, command):
        repo = current_domain.repository_for(GroupOrder)
        group_order = repo.get(command.group_order_id)
        if not group_order.is_open or not group_order.is_past_deadline():
            return False

        group_order.close_expired()
        repo.add(group_order)

        logger.info("Group order closed after deadline", group_order_id=str(group_order.id))
        return True


def join_group_order(vendor_id, group_order_id, quantity) -> str:
    """Join a group order, closing it first if its deadline has passed."""
    command = JoinGroupOrder(vendor_id=vendor_id, group_order_id=group_order_id, quantity=quantity)
    try:
        return current_domain.process(command, asynchronous=False)
    except Expired:
        current_domain.process(CloseExpiredGroupOrder(group_order_id=group_order_id), asynchronous=False)
        raise
