"""Order status updates — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.access import require_supplier
from marketplace.domain import marketplace
from marketplace.ordering.order import Order, OrderStatus
from marketplace.shared.errors import Forbidden

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    supplier_id = Identifier(required=True)  # the calling supplier
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        require_supplier(command.supplier_id, "update order status")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if str(order.supplier_id) != str(command.supplier_id):
            raise Forbidden("You can only update your own orders")

        previous = order.status
        order.change_status(command.status)
        repo.add(order)

        logger.info("Order status updated", order_id=str(order.id), previous_status=previous, status=order.status)
