"""
Utilities package for KV Throughput Bench.

Exports shared helpers for logging, profiling, and phase timing.
Keep this package lightweight and free of backend-specific logic.
"""

from kvbench.utils.logging import configure_logging, get_logger
from kvbench.utils.profiler import ProfileStats, profile_block
from kvbench.utils.timer import Timer

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
    "Timer",
]
