"""
No-op baseline store: measures the harness's own per-call overhead.
"""

from __future__ import annotations

from typing import List, Optional

from kvbench.domain.models import Entry
from kvbench.stores.abstract import AbstractStore


class NoopStore(AbstractStore):
    """
    Discards every write, echoes the key on read and never yields scan results.

    Nothing is stored, so read-back and scan checks cannot hold; the driver
    times the phases without verifying them.
    """

    name = "NOOP"
    verify = False

    def _put(self, key: str, value: str) -> None:
        pass

    def _get(self, key: str) -> Optional[str]:
        return key

    def _delete(self, key: str) -> None:
        pass

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        return []


__all__ = ["NoopStore"]
