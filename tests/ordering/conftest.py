import json

import pytest
from ordering.publishing import reset_publisher, set_publisher
from ordering.publishing.fake_adapter import RecordingPublisher
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def publisher():
    """Record outbound order events instead of delivering them."""
    recording = RecordingPublisher()
    set_publisher(recording)
    yield recording
    reset_publisher()


# ---------------------------------------------------------------------------
# Checkout data factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_item():
    def _make_item(product_id="prod-001", seller_id="seller-a", unit_price=50.0, quantity=2, **overrides):
        data = {
            "product_id": product_id,
            "product_name": f"Product {product_id}",
            "seller_id": seller_id,
            "seller_name": f"Shop {seller_id}",
            "unit_price": unit_price,
            "quantity": quantity,
        }
        data.update(overrides)
        return data

    return _make_item


@pytest.fixture()
def shipping():
    return {
        "shipping_address": "12 Harbour Road",
        "shipping_city": "Lisbon",
        "shipping_postal_code": "1100-001",
        "shipping_country": "PT",
        "phone_number": "+351 210 000 000",
    }


@pytest.fixture()
def place_order(make_item, shipping):
    """Place an order through the command handler and return its id."""
    from ordering.order.placement import PlaceOrder
    from protean import current_domain

    def _place_order(items=None, buyer_id="buyer-001", **overrides):
        kwargs = {
            "buyer_id": buyer_id,
            "buyer_name": "Ana Buyer",
            "buyer_email": "ana@example.com",
            "items": json.dumps(items if items is not None else [make_item()]),
            **shipping,
        }
        kwargs.update(overrides)
        return current_domain.process(PlaceOrder(**kwargs), asynchronous=False)

    return _place_order


@pytest.fixture()
def advance_order():
    """Move a stored order along a path of statuses as the given seller."""
    from ordering.order.status import UpdateOrderStatus
    from protean import current_domain

    def _advance_order(order_id, *statuses, seller_id="seller-a"):
        for status in statuses:
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, seller_id=seller_id, status=status),
                asynchronous=False,
            )

    return _advance_order
