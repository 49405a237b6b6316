"""
Configuration settings for KV Throughput Bench.

Uses Pydantic Settings to load environment variables for the benchmark
constants, backend storage locations, optional PostgreSQL connection details,
and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Benchmark constants
    benchmark_max_iterations: int = Field(100_000, alias="BENCHMARK_MAX_ITERATIONS", gt=0)
    benchmark_page_size: int = Field(50, alias="BENCHMARK_PAGE_SIZE", gt=0)
    benchmark_backends: str = Field("noop,memory,sqlite,lmdb", alias="BENCHMARK_BACKENDS")
    failure_policy: Literal["tolerant", "strict"] = Field("tolerant", alias="FAILURE_POLICY")

    # Embedded engines
    data_dir: str = Field("db", alias="DATA_DIR")
    sqlite_max_iterations: int = Field(2_000, alias="SQLITE_MAX_ITERATIONS", gt=0)
    lmdb_map_size: int = Field(1024 * 1024 * 1024, alias="LMDB_MAP_SIZE", gt=0)

    # PostgreSQL (opt-in backend)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("kvbench", alias="DB_NAME")
    postgres_max_iterations: int = Field(10_000, alias="POSTGRES_MAX_ITERATIONS", gt=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def backend_names(self) -> List[str]:
        """Default backends, in run order."""
        return [name.strip() for name in self.benchmark_backends.split(",") if name.strip()]

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
