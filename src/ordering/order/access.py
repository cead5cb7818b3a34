"""Ownership checks shared by order commands and queries."""

from ordering.errors import NotAuthorizedError


def ensure_buyer(order, buyer_id, action="view"):
    if not order.is_owned_by(buyer_id):
        raise NotAuthorizedError(f"You are not authorized to {action} this order")


def ensure_seller(order, seller_id, action="view"):
    if not order.has_items_from(seller_id):
        raise NotAuthorizedError(f"You are not authorized to {action} this order")
