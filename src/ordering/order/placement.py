"""Placing orders: checkout and reorder commands and their handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.access import ensure_buyer
from ordering.order.order import Order
from ordering.projections.seller_orders import index_order_sellers

logger = structlog.get_logger(__name__)

_ITEM_KEYS = (
    "product_id",
    "product_name",
    "seller_id",
    "seller_name",
    "unit_price",
    "quantity",
    "image_ref",
)


@ordering.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=255)
    items = Text(required=True)  # JSON: list of {product_id, product_name, seller_id, seller_name, unit_price, quantity, image_ref}
    shipping_address = String(max_length=500)
    shipping_city = String(max_length=100)
    shipping_postal_code = String(max_length=20)
    shipping_country = String(max_length=100)
    phone_number = String(max_length=30)
    payment_method = String(max_length=50)
    notes = Text()


@ordering.command(part_of="Order")
class Reorder:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=255)


def parse_items(raw) -> list[dict]:
    """Decode the JSON item list of a PlaceOrder command."""
    try:
        items = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from exc

    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Items must be a JSON list of objects"]})

    return [{key: item[key] for key in _ITEM_KEYS if key in item} for item in items]


def _record_new_order(order) -> str:
    current_domain.repository_for(Order).add(order)
    index_order_sellers(order)
    logger.info(
        "Order placed",
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        total_amount=order.total_amount,
        item_count=len(order.items),
    )
    return str(order.id)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            buyer_id=command.buyer_id,
            buyer_name=command.buyer_name,
            buyer_email=command.buyer_email,
            items_data=parse_items(command.items),
            shipping={
                "shipping_address": command.shipping_address,
                "shipping_city": command.shipping_city,
                "shipping_postal_code": command.shipping_postal_code,
                "shipping_country": command.shipping_country,
                "phone_number": command.phone_number,
            },
            payment_method=command.payment_method,
            notes=command.notes,
        )
        return _record_new_order(order)

    @handle(Reorder)
    def reorder(self, command):
        original = current_domain.repository_for(Order).find(command.order_id)
        ensure_buyer(original, command.buyer_id, action="reorder")

        order = Order.place(
            buyer_id=command.buyer_id,
            buyer_name=command.buyer_name or original.buyer_name,
            buyer_email=command.buyer_email or original.buyer_email,
            **original.reorder_data(),
        )
        logger.info("Reordering", source_order_id=str(original.id))
        return _record_new_order(order)
