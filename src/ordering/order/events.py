"""Domain events for the Order aggregate.

These are in-process facts recorded with every order change and consumed by
projections. The outbound notification sent to other services is the
``OrderEvent`` contract in ``shared.events.ordering``.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A buyer checked out and a new order was recorded as PENDING."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)  # JSON: list of seller ids
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    payment_method = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """A seller moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    reason = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The buyer cancelled the order before it entered processing."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)
