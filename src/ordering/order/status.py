"""Seller-driven status updates."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.access import ensure_seller
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        ensure_seller(order, command.seller_id, action="update")

        previous = order.status
        order.transition_to(OrderStatus(command.status), reason=command.reason)
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            seller_id=str(command.seller_id),
            previous_status=previous,
            new_status=order.status,
        )
