"""Schema helpers for RDBMS-backed providers.

Protean registers a table with the provider's SQLAlchemy metadata the first
time a repository DAO is built, so every aggregate and entity DAO is touched
before the metadata is created or dropped.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def _register_tables(domain: Domain, provider_name: str) -> int:
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    count = 0
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018
            count += 1
    return count


def setup_db(domain: Domain) -> None:
    """Create the tables of every SQL provider in the domain."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            tables = _register_tables(domain, name)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("schema_created", domain=domain.name, provider=name, tables=tables)


def drop_db(domain: Domain) -> None:
    """Drop the tables of every SQL provider in the domain."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            _register_tables(domain, name)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("schema_dropped", domain=domain.name, provider=name)
