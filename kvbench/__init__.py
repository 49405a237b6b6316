"""
KV Throughput Bench - micro-benchmarks for key-value storage backends.

Every backend (no-op, in-memory map, SQLite, LMDB, PostgreSQL) is driven
through one Store contract and measured for:

- Writes (upserts over a deterministic key space)
- Point reads, verified against what was written
- Full-range scans via cursor pagination, verified for completeness and order
- Deletes
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from kvbench.config import Settings, get_settings
from kvbench.domain import BackendOperationError, ContractViolation, Entry
from kvbench.driver import BackendReport, BenchmarkDriver, DriverConfig, get_key, get_value
from kvbench.orchestrator import available_backends, run_backends
from kvbench.stores.abstract import AbstractStore, Store
from kvbench.utils.logging import configure_logging, get_logger
from kvbench.utils.timer import Timer

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "available_backends",
    "run_backends",
    # Driver
    "BackendReport",
    "BenchmarkDriver",
    "DriverConfig",
    "get_key",
    "get_value",
    "Timer",
    # Store contract
    "AbstractStore",
    "Entry",
    "Store",
    # Errors
    "BackendOperationError",
    "ContractViolation",
    # Logging
    "configure_logging",
    "get_logger",
]
