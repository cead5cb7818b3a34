"""Read models for orders.

A buyer sees the whole order. A seller sees only their own lines of it, with
the total recomputed from those lines; the buyer's contact details stay visible
so the seller can ship.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ordering.order.order import items_total


@dataclass(frozen=True)
class OrderItemView:
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None
    unit_price: float
    quantity: int
    subtotal: float
    image_ref: str | None = None


@dataclass(frozen=True)
class OrderView:
    id: str
    buyer_id: str
    buyer_name: str | None
    buyer_email: str | None
    status: str
    total_amount: float
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_country: str
    phone_number: str
    payment_method: str | None
    notes: str | None
    cancellation_reason: str | None
    created_at: datetime | None
    updated_at: datetime | None
    confirmed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    items: list[OrderItemView] = field(default_factory=list)
    seller_scoped: bool = False


def _item_view(item) -> OrderItemView:
    return OrderItemView(
        product_id=str(item.product_id),
        product_name=item.product_name,
        seller_id=str(item.seller_id),
        seller_name=item.seller_name,
        unit_price=item.unit_price,
        quantity=item.quantity,
        subtotal=item.subtotal(),
        image_ref=item.image_ref,
    )


def _view(order, items, total_amount, seller_scoped) -> OrderView:
    return OrderView(
        id=str(order.id),
        buyer_id=str(order.buyer_id),
        buyer_name=order.buyer_name,
        buyer_email=order.buyer_email,
        status=order.status,
        total_amount=total_amount,
        shipping_address=order.shipping_address,
        shipping_city=order.shipping_city,
        shipping_postal_code=order.shipping_postal_code,
        shipping_country=order.shipping_country,
        phone_number=order.phone_number,
        payment_method=order.payment_method,
        notes=order.notes,
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at,
        updated_at=order.updated_at,
        confirmed_at=order.confirmed_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        cancelled_at=order.cancelled_at,
        items=[_item_view(item) for item in items],
        seller_scoped=seller_scoped,
    )


def buyer_view(order) -> OrderView:
    return _view(order, list(order.items), order.total_amount, seller_scoped=False)


def seller_view(order, seller_id) -> OrderView:
    """Redacted copy of ``order`` holding only ``seller_id``'s items.

    The stored order is never modified.
    """
    items = order.items_from(seller_id)
    return _view(order, items, items_total(items), seller_scoped=True)
