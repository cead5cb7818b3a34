"""Seller order index: which orders contain items from which seller.

Orders embed their line items, so "every order a seller sold into" cannot
be answered with a field lookup on the order itself. One index row is kept
per (seller, order) pair, written in the same unit of work as the order.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.utils.paging import fetch_all


@ordering.projection
class SellerOrderIndex:
    entry_id = String(identifier=True, required=True, max_length=255)  # "<seller_id>:<order_id>"
    seller_id = Identifier(required=True)
    order_id = Identifier(required=True)


def index_order_sellers(order):
    """Record one index row per distinct seller in ``order``."""
    repo = current_domain.repository_for(SellerOrderIndex)
    for seller_id in order.seller_ids():
        repo.add(
            SellerOrderIndex(
                entry_id=f"{seller_id}:{order.id}",
                seller_id=seller_id,
                order_id=str(order.id),
            )
        )


def order_ids_for_seller(seller_id) -> list[str]:
    query = current_domain.repository_for(SellerOrderIndex)._dao.query.filter(seller_id=str(seller_id))
    entries = fetch_all(query.order_by("entry_id"))
    return [str(entry.order_id) for entry in entries]
