"""
In-memory map store backed by a plain dict.
"""

from __future__ import annotations

import bisect
from typing import Dict, List, Optional

from kvbench.domain.models import Entry
from kvbench.stores.abstract import AbstractStore


class MemoryStore(AbstractStore):
    """
    Dict-backed store.

    Scans bisect into a sorted snapshot of the keys. The snapshot is dropped on
    any insert or delete and rebuilt by the next scan, so a scan-only phase
    sorts once.
    """

    name = "MapStore"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._data: Dict[str, str] = {}
        self._sorted_keys: Optional[List[str]] = None

    def _put(self, key: str, value: str) -> None:
        if key not in self._data:
            self._sorted_keys = None
        self._data[key] = value

    def _get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._sorted_keys = None

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        if self._sorted_keys is None:
            self._sorted_keys = sorted(self._data)
        keys = self._sorted_keys
        start = 0 if cursor is None else bisect.bisect_right(keys, cursor)
        return [Entry(key=key, value=self._data[key]) for key in keys[start : start + page_size]]

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["MemoryStore"]
