"""Repository for the Order aggregate with the query shapes the service needs."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import NotFoundError
from ordering.order.order import Order
from ordering.projections.seller_orders import order_ids_for_seller
from ordering.utils.paging import fetch_all


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@ordering.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order:
        """Fetch an order, raising ``NotFoundError`` when it does not exist."""
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError(f"Order {order_id} not found") from exc

    def by_buyer(self, buyer_id, status=None) -> list[Order]:
        """All orders placed by ``buyer_id``, newest first."""
        criteria = {"buyer_id": str(buyer_id)}
        if status is not None:
            criteria["status"] = status.value
        return fetch_all(self._dao.query.filter(**criteria).order_by("-created_at"))

    def containing_seller(self, seller_id, status=None) -> list[Order]:
        """All orders with at least one item sold by ``seller_id``, newest first."""
        orders = [self.find(order_id) for order_id in order_ids_for_seller(seller_id)]
        if status is not None:
            orders = [order for order in orders if order.status == status.value]
        return _newest_first(orders)
