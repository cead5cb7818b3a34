"""Outbound order notifications.

The handler below reacts to the Order's own domain events. Protean dispatches
them once the unit of work has committed, so the order is stored and readable
by the time a consumer sees the notification. A change that fails to commit
is never announced.

Publication is best-effort: a broken publisher is logged and never fails
the operation.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain
from shared.events.ordering import OrderEvent, OrderEventItem

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from ordering.order.order import STATUS_MILESTONES, Order, OrderStatus
from ordering.publishing import get_publisher, order_events_topic

logger = structlog.get_logger(__name__)


def build_order_event(order, event_type) -> OrderEvent:
    return OrderEvent(
        type=event_type,
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        status=order.status,
        items=[OrderEventItem(**item.to_dict()) for item in order.items],
        cancellation_reason=order.cancellation_reason,
    )


def announce(order, status: OrderStatus | None = None) -> None:
    """Publish the notification for ``status`` (the order's current status by default).

    Statuses without a milestone event (PROCESSING, REFUNDED) publish nothing.
    """
    event_type = STATUS_MILESTONES[status or order.current_status()].event_type
    if event_type is None:
        return

    event = build_order_event(order, event_type)
    try:
        get_publisher().publish(order_events_topic(), event.order_id, event.to_payload())
    except Exception as exc:
        logger.error(
            "Failed to publish order event",
            order_id=event.order_id,
            event_type=event_type.value,
            error=str(exc),
        )
        return

    logger.info("Order event queued", order_id=event.order_id, event_type=event_type.value)


@ordering.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Announces committed order milestones on the outbound channel."""

    def _announce_stored(self, order_id, status: OrderStatus) -> None:
        order = current_domain.repository_for(Order).find(order_id)
        announce(order, status)

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        self._announce_stored(event.order_id, OrderStatus.PENDING)

    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        self._announce_stored(event.order_id, OrderStatus(event.new_status))

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        self._announce_stored(event.order_id, OrderStatus.CANCELLED)
