"""Schema bootstrap for SQL-backed providers.

The memory provider needs nothing; for sqlite/postgresql every registered
aggregate and entity gets its DAO built so SQLAlchemy knows its table, then
the metadata is created (or dropped) in one go.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield name, provider


def _register_tables(domain: Domain, provider_name: str) -> None:
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every SQL provider configured on the domain."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_tables(domain, name)
            provider._metadata.create_all(engine)
            logger.info("Database schema created", provider=name)


def drop_db(domain: Domain) -> None:
    """Drop every table the domain's SQL providers know about."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_tables(domain, name)
            provider._metadata.drop_all(engine)
            logger.info("Database schema dropped", provider=name)
