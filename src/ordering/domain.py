"""Ordering bounded context: orders and shopping carts.

Handles checkout, the order status lifecycle, seller-scoped order views,
purchase statistics and the outbound order event channel used to keep
stock levels in other services eventually consistent.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
