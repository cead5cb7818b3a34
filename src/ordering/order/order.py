"""Order aggregate: the persisted purchase record and its status lifecycle.

An order belongs to exactly one buyer but may contain items from several
sellers. Line items are fixed at checkout; the total is derived from them.

State Machine:
    PENDING → CONFIRMED → (PROCESSING) → SHIPPED → DELIVERED → REFUNDED
    CANCELLED from PENDING or CONFIRMED (buyer), or PROCESSING (seller)
"""

import json
from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text
from shared.events.ordering import OrderEventType

from ordering.domain import ordering
from ordering.errors import InvalidOperationError
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


DEFAULT_PAYMENT_METHOD = "COD"
DEFAULT_CANCELLATION_REASON = "Cancelled by customer"

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

# States from which the buyer may cancel
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


class StatusMilestone(NamedTuple):
    timestamp_field: str | None
    event_type: OrderEventType | None


# What entering each status stamps on the order and announces downstream
STATUS_MILESTONES = {
    OrderStatus.PENDING: StatusMilestone(None, OrderEventType.ORDER_CREATED),
    OrderStatus.CONFIRMED: StatusMilestone("confirmed_at", OrderEventType.ORDER_CONFIRMED),
    OrderStatus.PROCESSING: StatusMilestone(None, None),
    OrderStatus.SHIPPED: StatusMilestone("shipped_at", OrderEventType.ORDER_SHIPPED),
    OrderStatus.DELIVERED: StatusMilestone("delivered_at", OrderEventType.ORDER_DELIVERED),
    OrderStatus.CANCELLED: StatusMilestone("cancelled_at", OrderEventType.ORDER_CANCELLED),
    OrderStatus.REFUNDED: StatusMilestone(None, None),
}

_SHIPPING_FIELDS = (
    "shipping_address",
    "shipping_city",
    "shipping_postal_code",
    "shipping_country",
    "phone_number",
)


def items_total(items) -> float:
    """Sum of line subtotals, rounded to cents."""
    return round(sum(item.unit_price * item.quantity for item in items), 2)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item captured at checkout.

    Product name, seller name and price are snapshots; later catalogue
    changes never alter an existing order.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image_ref = String(max_length=1000)

    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "seller_id": str(self.seller_id),
            "seller_name": self.seller_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "image_ref": self.image_ref,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=255)
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    shipping_address = String(required=True, max_length=500)
    shipping_city = String(required=True, max_length=100)
    shipping_postal_code = String(required=True, max_length=20)
    shipping_country = String(required=True, max_length=100)
    phone_number = String(required=True, max_length=30)
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD)
    notes = Text()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()
    confirmed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def order_must_contain_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    @invariant.post
    def total_must_match_items(self):
        if self.items and round(self.total_amount or 0.0, 2) != items_total(self.items):
            raise ValidationError({"total_amount": ["Total amount must equal the sum of item subtotals"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        buyer_id,
        buyer_name,
        buyer_email,
        items_data,
        shipping,
        payment_method=None,
        notes=None,
    ):
        """Create a PENDING order from checkout data.

        Args:
            buyer_id: The buyer placing the order.
            items_data: List of dicts with product_id, product_name, seller_id,
                        seller_name, unit_price, quantity and optional image_ref.
            shipping: Dict with shipping_address, shipping_city,
                      shipping_postal_code, shipping_country, phone_number.
        """
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        blank = [name for name in _SHIPPING_FIELDS if not (shipping.get(name) or "").strip()]
        if blank:
            raise ValidationError({name: ["is required"] for name in blank})

        items = []
        for index, item_data in enumerate(items_data):
            try:
                items.append(OrderItem(**item_data))
            except ValidationError as exc:
                raise ValidationError(
                    {f"items[{index}].{name}": messages for name, messages in exc.messages.items()}
                ) from exc
        now = datetime.now(UTC)

        order = cls(
            buyer_id=buyer_id,
            buyer_name=buyer_name,
            buyer_email=buyer_email,
            items=items,
            total_amount=items_total(items),
            status=OrderStatus.PENDING.value,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            notes=notes,
            created_at=now,
            updated_at=now,
            **{name: shipping[name].strip() for name in _SHIPPING_FIELDS},
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                seller_ids=json.dumps(order.seller_ids()),
                item_count=sum(item.quantity for item in items),
                total_amount=order.total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Ownership helpers
    # -------------------------------------------------------------------
    def is_owned_by(self, buyer_id) -> bool:
        return str(self.buyer_id) == str(buyer_id)

    def has_items_from(self, seller_id) -> bool:
        return any(str(item.seller_id) == str(seller_id) for item in self.items)

    def items_from(self, seller_id) -> list:
        return [item for item in self.items if str(item.seller_id) == str(seller_id)]

    def seller_ids(self) -> list[str]:
        """Distinct seller ids, in order of first appearance."""
        return list(dict.fromkeys(str(item.seller_id) for item in self.items))

    def purchase_date(self):
        """Delivery time when known, otherwise creation time."""
        return self.delivered_at or self.created_at

    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def reorder_data(self) -> dict:
        """Checkout data for placing this order again.

        Status, timestamps and notes are not carried over.
        """
        return {
            "items_data": [item.to_dict() for item in self.items],
            "shipping": {name: getattr(self, name) for name in _SHIPPING_FIELDS},
            "payment_method": self.payment_method,
        }

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = self.current_status()
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidOperationError(f"Invalid status transition from {current.value} to {target_status.value}")

    def _enter(self, target_status, now):
        self.status = target_status.value
        self.updated_at = now
        milestone = STATUS_MILESTONES[target_status]
        if milestone.timestamp_field:
            setattr(self, milestone.timestamp_field, now)

    def transition_to(self, target_status, reason=None):
        """Move the order to ``target_status`` if the state machine allows it."""
        self._assert_can_transition(target_status)

        previous = self.current_status()
        now = datetime.now(UTC)
        self._enter(target_status, now)
        if target_status == OrderStatus.CANCELLED:
            self.cancellation_reason = reason

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=target_status.value,
                reason=reason,
                changed_at=now,
            )
        )

    def cancel(self, reason=None, cancelled_by="buyer"):
        """Buyer-initiated cancellation, allowed only before processing starts."""
        current = self.current_status()
        if current not in _CANCELLABLE_STATES:
            raise InvalidOperationError(f"Order cannot be cancelled in current status: {current.value}")

        reason = reason or DEFAULT_CANCELLATION_REASON
        now = datetime.now(UTC)
        self._enter(OrderStatus.CANCELLED, now)
        self.cancellation_reason = reason

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

