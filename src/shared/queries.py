"""Unpaged reads over a repository.

Protean querysets fall back to the aggregate's page size (100 rows) unless
told otherwise. Listings, summaries and the tracker need every row, so they
read through ``fetch_all``.
"""

from protean.utils.globals import current_domain


def fetch_all(aggregate_cls, order_by=None, **filters) -> list:
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)
    if order_by:
        query = query.order_by(order_by)
    # Must be the last clone: cloning resets a None limit to the page size
    return query.limit(None).all().items
