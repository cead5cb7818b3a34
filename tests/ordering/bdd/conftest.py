"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.errors import InvalidOperationError, NotAuthorizedError
from ordering.order.cancellation import CancelOrder
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def error():
    """Container for the failure captured by a When step."""
    return {"exc": None}


def _capture(error, action):
    try:
        action()
    except (InvalidOperationError, NotAuthorizedError) as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'a buyer has placed an order with {qty_a:d} items at {price_a:f} and {qty_b:d} items at {price_b:f} from "{seller_id}"'
    ),
    target_fixture="order_id",
)
def placed_order(qty_a, price_a, qty_b, price_b, seller_id):
    items = [
        {"product_id": "p1", "product_name": "Mug", "seller_id": seller_id, "unit_price": price_a, "quantity": qty_a},
        {"product_id": "p2", "product_name": "Tea", "seller_id": seller_id, "unit_price": price_b, "quantity": qty_b},
    ]
    return current_domain.process(
        PlaceOrder(
            buyer_id="buyer-001",
            buyer_name="Ana Buyer",
            items=json.dumps(items),
            shipping_address="12 Harbour Road",
            shipping_city="Lisbon",
            shipping_postal_code="1100-001",
            shipping_country="PT",
            phone_number="+351 210 000 000",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('seller "{seller_id}" moves the order to "{status}"'))
def seller_moves_order(order_id, seller_id, status, error):
    _capture(
        error,
        lambda: current_domain.process(
            UpdateOrderStatus(order_id=order_id, seller_id=seller_id, status=status),
            asynchronous=False,
        ),
    )


@when("the buyer cancels the order")
def buyer_cancels(order_id, error):
    _capture(
        error,
        lambda: current_domain.process(CancelOrder(order_id=order_id, buyer_id="buyer-001"), asynchronous=False),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert _order(order_id).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(order_id, total):
    assert _order(order_id).total_amount == total


@then(parsers.cfparse('the cancellation reason is "{reason}"'))
def cancellation_reason_is(order_id, reason):
    assert _order(order_id).cancellation_reason == reason


@then(parsers.cfparse('an "{event_type}" event was published'))
def event_published(order_id, publisher, event_type):
    assert event_type in publisher.event_types(key=order_id)


@then(parsers.cfparse('the published events are "{event_types}"'))
def published_events_are(order_id, publisher, event_types):
    assert publisher.event_types(key=order_id) == [name.strip() for name in event_types.split(",")]


@then(parsers.cfparse('the request fails as an invalid operation mentioning "{first}" and "{second}"'))
def failed_invalid_operation(error, first, second):
    assert isinstance(error["exc"], InvalidOperationError)
    assert first in error["exc"].message
    assert second in error["exc"].message


@then("the request fails as not authorized")
def failed_not_authorized(error):
    assert isinstance(error["exc"], NotAuthorizedError)
