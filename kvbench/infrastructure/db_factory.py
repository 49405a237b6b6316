"""
Engine handle factories for KV Throughput Bench.

Opens the embedded engines (SQLite, LMDB) and the optional PostgreSQL
connection the stores wrap. Opening is the only place the harness retries:
a locked database file or a server still starting up is transient, while a
failure inside a timed phase is handled by the store's failure policy instead.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

import lmdb
import psycopg
from psycopg import Connection
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from kvbench.config import get_settings
from kvbench.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn() -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(sqlite3.OperationalError),
    reraise=True,
)
def open_sqlite(path: Path | str) -> sqlite3.Connection:
    """
    Open a SQLite database in autocommit mode with automatic retry.

    Every statement commits on its own, so each put/delete pays for a full
    transaction as a naive embedded client would.

    Raises
    ------
    sqlite3.OperationalError
        If the file cannot be opened after all retry attempts.
    """
    path = Path(path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)
    log.debug("Opening SQLite database", extra={"path": str(path)})
    return sqlite3.connect(str(path), isolation_level=None)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(lmdb.Error),
    reraise=True,
)
def open_lmdb(path: Path | str, map_size: Optional[int] = None) -> lmdb.Environment:
    """
    Open (creating if missing) an LMDB environment directory with automatic retry.

    Parameters
    ----------
    path : Path | str
        Environment directory.
    map_size : int | None
        Maximum size of the memory map in bytes. Defaults to settings.lmdb_map_size.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    size = map_size or get_settings().lmdb_map_size
    log.debug("Opening LMDB environment", extra={"path": str(path), "map_size": size})
    return lmdb.open(str(path), map_size=size, subdir=True, create=True)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated autocommit PostgreSQL connection with automatic retry.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn(), autocommit=True)


__all__ = [
    "build_dsn",
    "get_sync_connection",
    "open_lmdb",
    "open_sqlite",
]
