"""Buyer cancellation."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.access import ensure_buyer
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    reason = String(max_length=500)  # Defaults to "Cancelled by customer"


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        ensure_buyer(order, command.buyer_id, action="cancel")

        order.cancel(reason=command.reason, cancelled_by="buyer")
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), reason=order.cancellation_reason)
