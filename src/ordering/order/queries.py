"""Order lookups for buyers and sellers."""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.order.access import ensure_buyer, ensure_seller
from ordering.order.order import Order, OrderStatus
from ordering.order.views import OrderView, buyer_view, seller_view


class SortField(Enum):
    CREATED_AT = "created_at"
    TOTAL_AMOUNT = "total_amount"
    STATUS = "status"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class OrderSearch:
    keyword: str | None = None
    status: OrderStatus | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_dir: SortDirection = SortDirection.DESC

    @classmethod
    def from_params(cls, keyword=None, status=None, sort_by=None, sort_dir=None):
        """Build a search from raw request parameters."""
        errors = {}
        parsed = {}
        for name, value, enum_cls in (
            ("status", status, OrderStatus),
            ("sort_by", sort_by, SortField),
            ("sort_dir", sort_dir, SortDirection),
        ):
            if value is None or value == "":
                continue
            try:
                parsed[name] = enum_cls(value.upper() if enum_cls is OrderStatus else value.lower())
            except ValueError:
                errors[name] = [f"Unsupported value: {value}"]
        if errors:
            raise ValidationError(errors)
        return cls(keyword=(keyword or "").strip() or None, **parsed)


def _repository():
    return current_domain.repository_for(Order)


def order_for(order_id, caller_id, is_seller=False) -> OrderView:
    """Fetch one order as the caller is allowed to see it.

    The buyer always gets the whole order. A seller who did not place it gets
    only their own lines.
    """
    order = _repository().find(order_id)
    if is_seller and not order.is_owned_by(caller_id):
        ensure_seller(order, caller_id)
        return seller_view(order, caller_id)

    ensure_buyer(order, caller_id)
    return buyer_view(order)


def orders_for_buyer(buyer_id, status=None) -> list[OrderView]:
    return [buyer_view(order) for order in _repository().by_buyer(buyer_id, status=status)]


def orders_for_seller(seller_id, status=None) -> list[OrderView]:
    return [seller_view(order, seller_id) for order in _repository().containing_seller(seller_id, status=status)]


def _matches(view: OrderView, keyword: str) -> bool:
    needle = keyword.lower()
    haystack = [view.id, view.buyer_name or "", view.buyer_email or ""]
    haystack.extend(item.product_name for item in view.items)
    return any(needle in value.lower() for value in haystack)


def _sort_key(sort_by: SortField):
    # created_at is set for every stored order; the fallback keeps sort total
    if sort_by == SortField.TOTAL_AMOUNT:
        return lambda view: view.total_amount
    if sort_by == SortField.STATUS:
        return lambda view: view.status
    return lambda view: (view.created_at is not None, view.created_at or 0)


def _apply(views: list[OrderView], search: OrderSearch) -> list[OrderView]:
    if search.keyword:
        views = [view for view in views if _matches(view, search.keyword)]
    return sorted(views, key=_sort_key(search.sort_by), reverse=search.sort_dir == SortDirection.DESC)


def search_buyer_orders(buyer_id, search: OrderSearch) -> list[OrderView]:
    return _apply(orders_for_buyer(buyer_id, status=search.status), search)


def search_seller_orders(seller_id, search: OrderSearch) -> list[OrderView]:
    return _apply(orders_for_seller(seller_id, status=search.status), search)
