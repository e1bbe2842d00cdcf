"""Ordering bounded context — orders, cash ledger, coupons and checkout.

Holds the Order aggregate and its status tracker, the append-only cash
ledger, the coupon book, the client-side cart store, and the checkout
flow that turns a cart into a paid (or awaiting-payment) order.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
