"""Tests for the Cart aggregate: merging, quantity updates, sync and totals."""

import pytest
from ordering.cart.cart import Cart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved, CartSynced
from protean.exceptions import ValidationError


def _add(cart, product_id="prod-001", unit_price=10.0, quantity=1, **kwargs):
    cart.add_item(
        product_id=product_id,
        product_name=kwargs.pop("product_name", f"Product {product_id}"),
        seller_id=kwargs.pop("seller_id", "seller-a"),
        unit_price=unit_price,
        quantity=quantity,
        **kwargs,
    )


def _make_cart():
    cart = Cart.create(owner_id="buyer-001")
    cart._events.clear()
    return cart


class TestAddItem:
    def test_new_product_appends_entry(self):
        cart = _make_cart()
        _add(cart, "p1", quantity=2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_same_product_twice_merges_into_one_entry(self):
        cart = _make_cart()
        _add(cart, "p1", quantity=2)
        _add(cart, "p1", quantity=3)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_merge_keeps_first_snapshot(self):
        cart = _make_cart()
        _add(cart, "p1", unit_price=10.0, product_name="Old Name")
        _add(cart, "p1", unit_price=99.0, product_name="New Name")
        assert cart.items[0].unit_price == 10.0
        assert cart.items[0].product_name == "Old Name"

    def test_optional_fields_stored(self):
        cart = _make_cart()
        _add(cart, "p1", seller_name="Cup Co", stock_hint=7, image_ref="img/p1.png")
        item = cart.items[0]
        assert item.seller_name == "Cup Co"
        assert item.stock_hint == 7
        assert item.image_ref == "img/p1.png"

    def test_raises_item_added_event(self):
        cart = _make_cart()
        _add(cart, "p1", quantity=2)
        _add(cart, "p1", quantity=1)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert [e.new_quantity for e in events] == [2, 3]

    def test_updates_timestamp(self):
        cart = _make_cart()
        before = cart.updated_at
        _add(cart, "p1")
        assert cart.updated_at >= before


class TestUpdateQuantity:
    def test_sets_quantity(self):
        cart = _make_cart()
        _add(cart, "p1", quantity=1)
        cart.update_item_quantity("p1", 4)
        assert cart.items[0].quantity == 4
        assert isinstance(cart._events[-1], CartItemQuantityUpdated)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_zero_or_less_removes_entry(self, quantity):
        cart = _make_cart()
        _add(cart, "p1")
        _add(cart, "p2")
        cart.update_item_quantity("p1", quantity)
        assert len(cart.items) == 1
        assert not cart.contains("p1")
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_unknown_product_is_ignored(self):
        cart = _make_cart()
        _add(cart, "p1", quantity=1)
        cart._events.clear()
        cart.update_item_quantity("missing", 3)
        assert cart.items[0].quantity == 1
        assert cart._events == []


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        _add(cart, "p1")
        _add(cart, "p2")
        cart.remove_item("p1")
        assert [str(item.product_id) for item in cart.items] == ["p2"]

    def test_remove_unknown_product_is_ignored(self):
        cart = _make_cart()
        _add(cart, "p1")
        cart.remove_item("missing")
        assert len(cart.items) == 1

    def test_clear_empties_cart(self):
        cart = _make_cart()
        _add(cart, "p1")
        _add(cart, "p2")
        cart.clear()
        assert len(cart.items) == 0
        assert cart.total_amount() == 0
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_removed == 2


class TestReplaceItems:
    def test_replaces_existing_contents(self):
        cart = _make_cart()
        _add(cart, "old")
        cart.replace_items(
            [
                {"product_id": "p1", "product_name": "One", "seller_id": "s1", "unit_price": 5.0, "quantity": 2},
                {"product_id": "p2", "product_name": "Two", "seller_id": "s1", "unit_price": 1.5, "quantity": 4},
            ]
        )
        assert sorted(str(item.product_id) for item in cart.items) == ["p1", "p2"]
        assert isinstance(cart._events[-1], CartSynced)

    def test_skips_zero_quantities(self):
        cart = _make_cart()
        cart.replace_items(
            [
                {"product_id": "p1", "product_name": "One", "seller_id": "s1", "unit_price": 5.0, "quantity": 0},
                {"product_id": "p2", "product_name": "Two", "seller_id": "s1", "unit_price": 1.5, "quantity": 1},
            ]
        )
        assert [str(item.product_id) for item in cart.items] == ["p2"]

    def test_merges_repeated_products(self):
        cart = _make_cart()
        cart.replace_items(
            [
                {"product_id": "p1", "product_name": "One", "seller_id": "s1", "unit_price": 5.0, "quantity": 1},
                {"product_id": "p1", "product_name": "One", "seller_id": "s1", "unit_price": 5.0, "quantity": 2},
            ]
        )
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_empty_payload_empties_cart(self):
        cart = _make_cart()
        _add(cart, "p1")
        cart.replace_items([])
        assert len(cart.items) == 0

    def test_invalid_entry_rejected(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.replace_items([{"product_id": "p1", "seller_id": "s1", "unit_price": 5.0, "quantity": 1}])


class TestTotals:
    def test_totals_computed_on_read(self):
        cart = _make_cart()
        _add(cart, "p1", unit_price=12.5, quantity=2)
        _add(cart, "p2", unit_price=0.1, quantity=3)
        assert cart.total_amount() == 25.3
        assert cart.total_items() == 5

    def test_contains(self):
        cart = _make_cart()
        _add(cart, "p1")
        assert cart.contains("p1")
        assert not cart.contains("p2")
