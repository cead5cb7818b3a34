"""Repository for the Cart aggregate, looked up by owner."""

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.errors import NotFoundError


@ordering.repository(part_of=Cart)
class CartRepository:
    def find_for_owner(self, owner_id) -> Cart | None:
        carts = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return carts[0] if carts else None

    def for_owner(self, owner_id) -> Cart:
        """The owner's cart, raising ``NotFoundError`` when there is none."""
        cart = self.find_for_owner(owner_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        return cart

    def get_or_create(self, owner_id) -> Cart:
        """The owner's cart, creating and persisting an empty one if needed."""
        cart = self.find_for_owner(owner_id)
        if cart is None:
            cart = Cart.create(owner_id=owner_id)
            self.add(cart)
        return cart
