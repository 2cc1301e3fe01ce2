"""
Infrastructure package for fleetview.

Centralizes database connectivity concerns (shared async pool, retrying
pool startup, schema DDL). Keep this layer focused on I/O and resource
management, decoupled from the store, aggregator, and filter logic.
"""

from fleetview.infrastructure.db_factory import (
    DOCUMENTS_TABLE_DDL,
    PoolManager,
    apply_statement_timeout,
    build_dsn,
)

__all__ = [
    "DOCUMENTS_TABLE_DDL",
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
]
