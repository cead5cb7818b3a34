"""Cart aggregate: a buyer's pre-checkout line items.

There is exactly one cart per owner, and at most one entry per product.
Adding a product that is already in the cart increases its quantity and keeps
the name and price captured when it was first added.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
    CartSynced,
)
from ordering.domain import ordering


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=0)
    stock_hint = Integer()  # Informational only
    image_ref = String(max_length=1000)

    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@ordering.aggregate
class Cart:
    owner_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def products_must_be_unique(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id):
        now = datetime.now(UTC)
        return cls(owner_id=owner_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def find_item(self, product_id):
        return next((item for item in self.items if str(item.product_id) == str(product_id)), None)

    def contains(self, product_id) -> bool:
        return self.find_item(product_id) is not None

    def total_amount(self) -> float:
        return round(sum(item.unit_price * item.quantity for item in self.items), 2)

    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _merge(self, item_data) -> int:
        existing = self.find_item(item_data["product_id"])
        if existing:
            existing.quantity += item_data["quantity"]
            return existing.quantity

        self.add_items(CartItem(**item_data))
        return item_data["quantity"]

    def add_item(
        self,
        product_id,
        product_name,
        seller_id,
        unit_price,
        quantity,
        seller_name=None,
        stock_hint=None,
        image_ref=None,
    ):
        """Add a product, or increase the quantity of an existing entry."""
        new_quantity = self._merge(
            {
                "product_id": product_id,
                "product_name": product_name,
                "seller_id": seller_id,
                "seller_name": seller_name,
                "unit_price": unit_price,
                "quantity": quantity,
                "stock_hint": stock_hint,
                "image_ref": image_ref,
            }
        )
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                product_id=str(product_id),
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def update_item_quantity(self, product_id, quantity):
        """Set an entry's quantity; zero or less removes it.

        Unknown products are ignored.
        """
        item = self.find_item(product_id)
        if item is None:
            return

        if quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.find_item(product_id)
        self.updated_at = datetime.now(UTC)
        if item is None:
            return

        self.remove_items(item)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def _drop_all(self) -> int:
        items = list(self.items)
        for item in items:
            self.remove_items(item)
        return len(items)

    def clear(self):
        removed = self._drop_all()
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))

    def replace_items(self, items_data):
        """Overwrite the cart contents with ``items_data``.

        Entries with a zero quantity are skipped and repeated products are
        merged by summing their quantities.
        """
        with atomic_change(self):
            self._drop_all()
            for item_data in items_data:
                if item_data.get("quantity", 0) > 0:
                    self._merge(item_data)
            self.updated_at = datetime.now(UTC)

        self.raise_(CartSynced(cart_id=str(self.id), item_count=len(self.items)))
