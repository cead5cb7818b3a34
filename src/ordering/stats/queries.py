"""Statistics for a buyer or seller, loaded from the order store."""

from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.stats import aggregator


def _orders_for_buyer(buyer_id):
    return current_domain.repository_for(Order).by_buyer(buyer_id)


def _orders_for_seller(seller_id):
    return current_domain.repository_for(Order).containing_seller(seller_id)


def user_stats(buyer_id) -> aggregator.UserStats:
    return aggregator.user_stats(_orders_for_buyer(buyer_id))


def user_product_stats(buyer_id) -> aggregator.UserProductStats:
    return aggregator.user_product_stats(_orders_for_buyer(buyer_id))


def seller_stats(seller_id) -> aggregator.SellerStats:
    return aggregator.seller_stats(_orders_for_seller(seller_id), seller_id)


def seller_product_stats(seller_id) -> aggregator.SellerProductStats:
    return aggregator.seller_product_stats(_orders_for_seller(seller_id), seller_id)
