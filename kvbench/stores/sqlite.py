"""
SQLite-backed store using the standard library driver in autocommit mode.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Optional

from kvbench.domain.models import Entry
from kvbench.infrastructure.db_factory import open_sqlite
from kvbench.stores.abstract import AbstractStore, FailurePolicy

DEFAULT_MAX_ITERATIONS = 2_000


class SqliteStore(AbstractStore):
    """
    One row per key in a `kv` table, recreated empty at open.

    Each statement is its own transaction, which makes per-operation cost high;
    the iteration count is therefore capped (2,000 by default).
    """

    name = "Sqlite"
    backend_errors = (sqlite3.Error,)

    def __init__(
        self,
        path: Path | str,
        failure_policy: FailurePolicy = "tolerant",
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        super().__init__(failure_policy=failure_policy, max_iterations=max_iterations)
        self.path = path
        self._conn = open_sqlite(path)
        self._conn.execute("DROP TABLE IF EXISTS kv")
        self._conn.execute("CREATE TABLE kv (k TEXT NOT NULL PRIMARY KEY, v TEXT)")

    def _put(self, key: str, value: str) -> None:
        self._conn.execute("INSERT OR REPLACE INTO kv (k, v) VALUES (?, ?)", (key, value))

    def _get(self, key: str) -> Optional[str]:
        row = self._conn.execute("SELECT v FROM kv WHERE k = ?", (key,)).fetchone()
        return row[0] if row else None

    def _delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE k = ?", (key,))

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        if cursor is None:
            rows = self._conn.execute(
                "SELECT k, v FROM kv ORDER BY k LIMIT ?", (page_size,)
            ).fetchall()
        else:
            rows = self._conn.execute(
                "SELECT k, v FROM kv WHERE k > ? ORDER BY k LIMIT ?", (cursor, page_size)
            ).fetchall()
        return [Entry(key=k, value=v) for k, v in rows]

    def close(self) -> None:
        self._conn.close()


__all__ = ["SqliteStore"]
