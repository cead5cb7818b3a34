"""Cart reads.

Reading a cart never fails. ``cart_for`` gives an owner without one a fresh,
persisted, empty cart; the summary reads answer for an empty cart and store
nothing.
"""

from dataclasses import dataclass, field
from datetime import datetime

from protean.utils.globals import current_domain

from ordering.cart.cart import Cart


@dataclass(frozen=True)
class CartItemView:
    product_id: str
    product_name: str
    seller_id: str
    seller_name: str | None
    unit_price: float
    quantity: int
    subtotal: float
    stock_hint: int | None = None
    image_ref: str | None = None


@dataclass(frozen=True)
class CartView:
    id: str
    owner_id: str
    total_amount: float
    total_items: int
    updated_at: datetime | None
    items: list[CartItemView] = field(default_factory=list)


def _view(cart) -> CartView:
    return CartView(
        id=str(cart.id),
        owner_id=str(cart.owner_id),
        total_amount=cart.total_amount(),
        total_items=cart.total_items(),
        updated_at=cart.updated_at,
        items=[
            CartItemView(
                product_id=str(item.product_id),
                product_name=item.product_name,
                seller_id=str(item.seller_id),
                seller_name=item.seller_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                subtotal=item.subtotal(),
                stock_hint=item.stock_hint,
                image_ref=item.image_ref,
            )
            for item in cart.items
        ],
    )


def _repository():
    return current_domain.repository_for(Cart)


def cart_for(owner_id) -> CartView:
    return _view(_repository().get_or_create(owner_id))


def cart_item_count(owner_id) -> int:
    cart = _repository().find_for_owner(owner_id)
    return cart.total_items() if cart else 0


def cart_total(owner_id) -> float:
    cart = _repository().find_for_owner(owner_id)
    return cart.total_amount() if cart else 0.0


def is_product_in_cart(owner_id, product_id) -> bool:
    cart = _repository().find_for_owner(owner_id)
    return cart is not None and cart.contains(product_id)
