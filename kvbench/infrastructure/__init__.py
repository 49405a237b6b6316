"""
Infrastructure package for KV Throughput Bench.

Centralizes engine connectivity (SQLite files, LMDB environments, PostgreSQL
connections). Keep this layer focused on opening resources, decoupled from
store and driver logic.
"""

from kvbench.infrastructure.db_factory import (
    build_dsn,
    get_sync_connection,
    open_lmdb,
    open_sqlite,
)

__all__ = [
    "build_dsn",
    "get_sync_connection",
    "open_lmdb",
    "open_sqlite",
]
