"""Purchase and sales statistics.

Pure functions over already-loaded orders; nothing here touches a
repository. Most figures only count DELIVERED orders. Rankings sort
descending on their metric and keep the order in which entries were first
seen when values tie.

Categories are approximated by seller name because order items carry no
product category.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ordering.order.order import OrderStatus

TOP_PRODUCTS = 10
TOP_CATEGORIES = 5
RECENT_SALES = 10
UNKNOWN_CATEGORY = "Unknown"

_RECENT_SALE_STATUSES = {OrderStatus.DELIVERED.value, OrderStatus.SHIPPED.value}


@dataclass(frozen=True)
class UserStats:
    total_orders: int
    completed_orders: int
    total_spent: float


@dataclass(frozen=True)
class SellerStats:
    total_orders: int
    completed_orders: int
    total_revenue: float
    total_items_sold: int


@dataclass
class ProductPurchase:
    product_id: str
    product_name: str
    seller_id: str | None = None
    seller_name: str | None = None
    total_quantity: int = 0
    total_spent: float = 0.0
    last_purchased_at: datetime | None = None
    image_ref: str | None = None


@dataclass
class CategorySpend:
    category: str
    order_count: int = 0
    item_count: int = 0
    total_spent: float = 0.0


@dataclass(frozen=True)
class UserProductStats:
    top_products: list[ProductPurchase] = field(default_factory=list)
    top_categories: list[CategorySpend] = field(default_factory=list)
    total_unique_products: int = 0
    total_items_purchased: int = 0


@dataclass
class BestSeller:
    product_id: str
    product_name: str
    total_sold: int = 0
    revenue: float = 0.0
    order_count: int = 0
    image_ref: str | None = None


@dataclass(frozen=True)
class RecentSale:
    order_id: str
    product_id: str
    product_name: str
    customer_name: str | None
    quantity: int
    amount: float
    sale_date: datetime | None


@dataclass(frozen=True)
class SellerProductStats:
    best_sellers: list[BestSeller] = field(default_factory=list)
    recent_sales: list[RecentSale] = field(default_factory=list)
    total_customers: int = 0
    total_products_sold: int = 0


def _delivered(orders) -> list:
    return [order for order in orders if order.status == OrderStatus.DELIVERED.value]


def _top(rows, metric, limit):
    return sorted(rows, key=lambda row: getattr(row, metric), reverse=True)[:limit]


def user_stats(orders) -> UserStats:
    delivered = _delivered(orders)
    return UserStats(
        total_orders=len(orders),
        completed_orders=len(delivered),
        total_spent=round(sum(order.total_amount for order in delivered), 2),
    )


def seller_stats(orders, seller_id) -> SellerStats:
    """Totals for ``seller_id`` counting only their own items."""
    delivered = _delivered(orders)
    items = [item for order in delivered for item in order.items_from(seller_id)]
    return SellerStats(
        total_orders=len(orders),
        completed_orders=len(delivered),
        total_revenue=round(sum(item.subtotal() for item in items), 2),
        total_items_sold=sum(item.quantity for item in items),
    )


def user_product_stats(orders) -> UserProductStats:
    products: dict[str, ProductPurchase] = {}
    categories: dict[str, CategorySpend] = {}

    for order in _delivered(orders):
        purchased_at = order.purchase_date()
        categories_in_order = set()

        for item in order.items:
            product = products.setdefault(
                str(item.product_id),
                ProductPurchase(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    seller_id=str(item.seller_id),
                    seller_name=item.seller_name,
                ),
            )
            product.total_quantity += item.quantity
            product.total_spent = round(product.total_spent + item.subtotal(), 2)
            if product.last_purchased_at is None or (purchased_at and purchased_at > product.last_purchased_at):
                product.last_purchased_at = purchased_at
            product.image_ref = product.image_ref or item.image_ref

            name = item.seller_name or UNKNOWN_CATEGORY
            category = categories.setdefault(name, CategorySpend(category=name))
            category.item_count += item.quantity
            category.total_spent = round(category.total_spent + item.subtotal(), 2)
            if name not in categories_in_order:
                category.order_count += 1
                categories_in_order.add(name)

    return UserProductStats(
        top_products=_top(products.values(), "total_quantity", TOP_PRODUCTS),
        top_categories=_top(categories.values(), "total_spent", TOP_CATEGORIES),
        total_unique_products=len(products),
        total_items_purchased=sum(product.total_quantity for product in products.values()),
    )


def _recent_sales(orders, seller_id) -> list[RecentSale]:
    # Orders without any timestamp sort last
    eligible = [order for order in orders if order.status in _RECENT_SALE_STATUSES]
    eligible.sort(key=lambda order: (order.purchase_date() is not None, order.purchase_date() or 0), reverse=True)

    sales = [
        RecentSale(
            order_id=str(order.id),
            product_id=str(item.product_id),
            product_name=item.product_name,
            customer_name=order.buyer_name,
            quantity=item.quantity,
            amount=item.subtotal(),
            sale_date=order.purchase_date(),
        )
        for order in eligible
        for item in order.items_from(seller_id)
    ]
    return sales[:RECENT_SALES]


def seller_product_stats(orders, seller_id) -> SellerProductStats:
    delivered = _delivered(orders)
    products: dict[str, BestSeller] = {}

    for order in delivered:
        counted = set()
        for item in order.items_from(seller_id):
            product_id = str(item.product_id)
            product = products.setdefault(
                product_id,
                BestSeller(product_id=product_id, product_name=item.product_name, image_ref=item.image_ref),
            )
            product.total_sold += item.quantity
            product.revenue = round(product.revenue + item.subtotal(), 2)
            if product_id not in counted:
                product.order_count += 1
                counted.add(product_id)

    return SellerProductStats(
        best_sellers=_top(products.values(), "total_sold", TOP_PRODUCTS),
        recent_sales=_recent_sales(orders, seller_id),
        total_customers=len({str(order.buyer_id) for order in delivered}),
        total_products_sold=len(products),
    )
