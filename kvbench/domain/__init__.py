"""
Domain package for KV Throughput Bench.

Exports the scan record and the exceptions shared by stores and the driver.
Keep this package focused on data definitions.
"""

from kvbench.domain.exceptions import BackendOperationError, ContractViolation
from kvbench.domain.models import Entry

__all__ = [
    "BackendOperationError",
    "ContractViolation",
    "Entry",
]
