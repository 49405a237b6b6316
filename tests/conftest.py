"""
Pytest configuration for KV Throughput Bench.

Provides fixtures for:
- Settings isolation (data directory under tmp_path, cache cleared)
- Store construction for every embedded backend
- PostgreSQL connection details for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Generator, List

import psycopg
import pytest

from kvbench.config import Settings, get_settings
from kvbench.driver import get_key, get_value
from kvbench.stores import AbstractStore, LmdbStore, MemoryStore, SqliteStore

EMBEDDED_BACKENDS = ["memory", "sqlite", "lmdb"]


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """
    Point every test at a private data directory and a fresh settings cache.
    """
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "db"))
    monkeypatch.setenv("LMDB_MAP_SIZE", str(64 * 1024 * 1024))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def make_store(tmp_path: Path) -> Generator[Callable[..., AbstractStore], None, None]:
    """
    Factory building an embedded store by backend name; closes everything it built.
    """
    created: List[AbstractStore] = []

    def _make(backend: str, **kwargs) -> AbstractStore:
        if backend == "memory":
            store: AbstractStore = MemoryStore(**kwargs)
        elif backend == "sqlite":
            store = SqliteStore(tmp_path / f"store-{len(created)}.sqlite", **kwargs)
        elif backend == "lmdb":
            store = LmdbStore(
                tmp_path / f"store-{len(created)}.lmdb", map_size=64 * 1024 * 1024, **kwargs
            )
        else:
            raise ValueError(backend)
        created.append(store)
        return store

    yield _make
    for store in created:
        store.close()


@pytest.fixture(params=EMBEDDED_BACKENDS)
def store(request: pytest.FixtureRequest, make_store) -> AbstractStore:
    """Each embedded backend in turn, empty."""
    return make_store(request.param)


def _populate(store: AbstractStore, count: int) -> List[str]:
    keys = []
    for i in range(count):
        store.put(get_key(i), get_value(i))
        keys.append(get_key(i))
    return sorted(keys)


@pytest.fixture
def populate() -> Callable[[AbstractStore, int], List[str]]:
    """Put keys 0..count-1 the way the driver does; return the keys in sorted order."""
    return _populate


@pytest.fixture(scope="session")
def test_dsn() -> str:
    """
    Database connection string for PostgreSQL integration tests.
    """
    return (
        f"postgresql://{os.getenv('DB_USER', 'postgres')}:{os.getenv('DB_PASSWORD', 'postgres')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}"
        f"/{os.getenv('DB_NAME', 'kvbench')}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False
