"""
Stores package for KV Throughput Bench.

This module re-exports the Store contract and the concrete backends so
downstream code can import from `kvbench.stores` directly.
"""

from kvbench.stores.abstract import AbstractStore, FailurePolicy, Store
from kvbench.stores.lmdb_store import LmdbStore
from kvbench.stores.memory import MemoryStore
from kvbench.stores.noop import NoopStore
from kvbench.stores.postgres import PostgresStore
from kvbench.stores.sqlite import SqliteStore

__all__ = [
    # Contract
    "AbstractStore",
    "FailurePolicy",
    "Store",
    # Concrete backends
    "LmdbStore",
    "MemoryStore",
    "NoopStore",
    "PostgresStore",
    "SqliteStore",
]
