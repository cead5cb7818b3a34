"""Cross-service event contract for Ordering notifications.

Every successful order placement, and every status change that other
services care about, is announced on the ``order-events`` topic, keyed by
order id. The Inventory service consumes these to decrement stock on
ORDER_CREATED and restore it on ORDER_CANCELLED.

Delivery is best-effort: consumers must tolerate lost notifications.
"""

from dataclasses import dataclass, field
from enum import Enum

ORDER_EVENTS_TOPIC = "order-events"


class OrderEventType(Enum):
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_DELIVERED = "ORDER_DELIVERED"
    ORDER_CANCELLED = "ORDER_CANCELLED"


@dataclass(frozen=True)
class OrderEventItem:
    """Line item snapshot carried by an order event."""

    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None
    unit_price: float
    quantity: int
    image_ref: str | None = None


@dataclass(frozen=True)
class OrderEvent:
    type: OrderEventType
    order_id: str
    buyer_id: str
    status: str
    items: list[OrderEventItem] = field(default_factory=list)
    cancellation_reason: str | None = None

    def to_payload(self) -> dict:
        """Render the event as a JSON-serializable dict."""
        return {
            "type": self.type.value,
            "order_id": self.order_id,
            "buyer_id": self.buyer_id,
            "status": self.status,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "seller_id": item.seller_id,
                    "seller_name": item.seller_name,
                    "unit_price": item.unit_price,
                    "quantity": item.quantity,
                    "image_ref": item.image_ref,
                }
                for item in self.items
            ],
            "cancellation_reason": self.cancellation_reason,
        }
