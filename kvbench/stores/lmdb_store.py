"""
LMDB-backed store: the embedded, memory-mapped B+tree engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import lmdb

from kvbench.domain.models import Entry
from kvbench.infrastructure.db_factory import open_lmdb
from kvbench.stores.abstract import AbstractStore, FailurePolicy


def _encode(value: str) -> bytes:
    return value.encode("utf-8")


def _decode(value: bytes) -> str:
    return bytes(value).decode("utf-8")


class LmdbStore(AbstractStore):
    """
    Keys and values stored as UTF-8 bytes in the environment's main database.

    LMDB orders keys bytewise, which for UTF-8 matches the code-point order of
    the original strings. The database is emptied at open.
    """

    name = "LMDB"
    backend_errors = (lmdb.Error,)

    def __init__(
        self,
        path: Path | str,
        map_size: Optional[int] = None,
        failure_policy: FailurePolicy = "tolerant",
        max_iterations: Optional[int] = None,
    ) -> None:
        super().__init__(failure_policy=failure_policy, max_iterations=max_iterations)
        self.path = path
        self._env = open_lmdb(path, map_size=map_size)
        main_db = self._env.open_db()
        with self._env.begin(write=True) as txn:
            txn.drop(main_db, delete=False)

    def _put(self, key: str, value: str) -> None:
        with self._env.begin(write=True) as txn:
            txn.put(_encode(key), _encode(value))

    def _get(self, key: str) -> Optional[str]:
        with self._env.begin() as txn:
            raw = txn.get(_encode(key))
        return _decode(raw) if raw is not None else None

    def _delete(self, key: str) -> None:
        with self._env.begin(write=True) as txn:
            txn.delete(_encode(key))

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        items: List[Entry] = []
        with self._env.begin() as txn:
            it = txn.cursor()
            if cursor is None:
                found = it.first()
            else:
                start = _encode(cursor)
                found = it.set_range(start)
                # set_range lands on the first key >= cursor; the cursor itself is excluded
                if found and it.key() == start:
                    found = it.next()
            while found and len(items) < page_size:
                items.append(Entry(key=_decode(it.key()), value=_decode(it.value())))
                found = it.next()
        return items

    def close(self) -> None:
        self._env.close()


__all__ = ["LmdbStore"]
