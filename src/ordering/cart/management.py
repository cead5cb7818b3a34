"""Cart management: clearing, client sync and deletion."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)

_ITEM_KEYS = (
    "product_id",
    "product_name",
    "seller_id",
    "seller_name",
    "unit_price",
    "quantity",
    "stock_hint",
    "image_ref",
)
_REQUIRED_ITEM_KEYS = ("product_id", "product_name", "seller_id", "unit_price")


def _whole_number(value) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(value)
    return int(value)


@ordering.command(part_of="Cart")
class ClearCart:
    owner_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class SyncCart:
    """Replace the server-side cart with the client's copy."""

    owner_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, product_name, seller_id, unit_price, quantity, ...}


@ordering.command(part_of="Cart")
class DeleteCart:
    owner_id = Identifier(required=True)


def parse_cart_items(raw) -> list[dict]:
    """Decode a SyncCart payload into item dicts with integer quantities."""
    try:
        items = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from exc

    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Items must be a JSON list of objects"]})

    parsed = []
    for index, item in enumerate(items):
        missing = [key for key in _REQUIRED_ITEM_KEYS if item.get(key) in (None, "")]
        if missing:
            raise ValidationError({f"items[{index}].{key}": ["is required"] for key in missing})

        data = {key: item[key] for key in _ITEM_KEYS if key in item}
        try:
            data["quantity"] = _whole_number(data.get("quantity", 0))
        except (TypeError, ValueError) as exc:
            raise ValidationError({f"items[{index}].quantity": ["Quantity must be a whole number"]}) from exc
        parsed.append(data)
    return parsed


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.owner_id)
        cart.clear()
        repo.add(cart)

    @handle(SyncCart)
    def sync_cart(self, command):
        items = parse_cart_items(command.items)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.owner_id)
        cart.replace_items(items)
        repo.add(cart)

        logger.info("Cart synced", owner_id=str(command.owner_id), item_count=len(cart.items))
        return str(cart.id)

    @handle(DeleteCart)
    def delete_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_owner(command.owner_id)
        if cart is not None:
            repo._dao.delete(cart)
            logger.info("Cart deleted", owner_id=str(command.owner_id))
