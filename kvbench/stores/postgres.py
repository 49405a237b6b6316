"""
PostgreSQL-backed store (opt-in): a client/server baseline next to the
embedded engines.
"""

from __future__ import annotations

from typing import List, Optional

import psycopg
from psycopg import sql

from kvbench.domain.models import Entry
from kvbench.infrastructure.db_factory import get_sync_connection
from kvbench.stores.abstract import AbstractStore, FailurePolicy

DEFAULT_MAX_ITERATIONS = 10_000


class PostgresStore(AbstractStore):
    """
    One row per key in an autocommit `kv` table, recreated empty at open.

    The key column uses the "C" collation so ORDER BY and the keyset
    comparison agree with Python's string ordering.
    """

    name = "Postgres"
    backend_errors = (psycopg.Error,)

    def __init__(
        self,
        dsn_override: Optional[str] = None,
        table: str = "kv",
        failure_policy: FailurePolicy = "tolerant",
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        super().__init__(failure_policy=failure_policy, max_iterations=max_iterations)
        self.table = table
        self._conn = get_sync_connection(dsn_override)
        ident = sql.Identifier(table)
        with self._conn.cursor() as cur:
            cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(ident))
            cur.execute(
                sql.SQL(
                    'CREATE TABLE {} (k TEXT COLLATE "C" NOT NULL PRIMARY KEY, v TEXT)'
                ).format(ident)
            )
        self._sql_put = sql.SQL(
            "INSERT INTO {} (k, v) VALUES (%s, %s) ON CONFLICT (k) DO UPDATE SET v = EXCLUDED.v"
        ).format(ident)
        self._sql_get = sql.SQL("SELECT v FROM {} WHERE k = %s").format(ident)
        self._sql_delete = sql.SQL("DELETE FROM {} WHERE k = %s").format(ident)
        self._sql_first_page = sql.SQL("SELECT k, v FROM {} ORDER BY k LIMIT %s").format(
            ident
        )
        self._sql_next_page = sql.SQL(
            "SELECT k, v FROM {} WHERE k > %s ORDER BY k LIMIT %s"
        ).format(ident)

    def _put(self, key: str, value: str) -> None:
        self._conn.execute(self._sql_put, (key, value))

    def _get(self, key: str) -> Optional[str]:
        row = self._conn.execute(self._sql_get, (key,)).fetchone()
        return row[0] if row else None

    def _delete(self, key: str) -> None:
        self._conn.execute(self._sql_delete, (key,))

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        if cursor is None:
            rows = self._conn.execute(self._sql_first_page, (page_size,)).fetchall()
        else:
            rows = self._conn.execute(self._sql_next_page, (cursor, page_size)).fetchall()
        return [Entry(key=k, value=v) for k, v in rows]

    def close(self) -> None:
        self._conn.close()


__all__ = ["PostgresStore"]
