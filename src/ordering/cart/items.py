"""Cart item management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    stock_hint = Integer()
    image_ref = String(max_length=1000)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # Zero or less removes the item


@ordering.command(part_of="Cart")
class RemoveFromCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.owner_id)
        cart.add_item(
            product_id=command.product_id,
            product_name=command.product_name,
            seller_id=command.seller_id,
            seller_name=command.seller_name,
            unit_price=command.unit_price,
            quantity=command.quantity,
            stock_hint=command.stock_hint,
            image_ref=command.image_ref,
        )
        repo.add(cart)
        logger.debug("Item added to cart", owner_id=str(command.owner_id), product_id=str(command.product_id))
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner(command.owner_id)
        cart.update_item_quantity(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner(command.owner_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)
