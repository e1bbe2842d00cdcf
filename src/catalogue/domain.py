"""Catalogue bounded context: the bakery's products and ingredient stock.

Both aggregates are owned by staff through the admin back-office.
"""

import structlog
from protean.domain import Domain

catalogue = Domain(name="catalogue")

logger = structlog.get_logger(__name__)
