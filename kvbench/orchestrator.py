"""
Orchestrator for building stores, running the driver, and persisting results.

Usage (example from CLI):
    from kvbench.orchestrator import run_backends

    results = run_backends(names=["memory", "sqlite"], max_iterations=10_000)
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from kvbench.config import Settings, get_settings
from kvbench.driver import BackendReport, BenchmarkDriver, DriverConfig
from kvbench.stores.abstract import Store
from kvbench.stores.lmdb_store import LmdbStore
from kvbench.stores.memory import MemoryStore
from kvbench.stores.noop import NoopStore
from kvbench.stores.postgres import PostgresStore
from kvbench.stores.sqlite import SqliteStore
from kvbench.utils.logging import get_logger

log = get_logger(__name__)


def _store_factories(settings: Settings) -> Dict[str, Callable[[], Store]]:
    """Registry of available backends."""
    data_path = settings.data_path
    policy = settings.failure_policy
    return {
        "noop": lambda: NoopStore(failure_policy=policy),
        "memory": lambda: MemoryStore(failure_policy=policy),
        "sqlite": lambda: SqliteStore(
            data_path / "data.sqlite",
            failure_policy=policy,
            max_iterations=settings.sqlite_max_iterations,
        ),
        "lmdb": lambda: LmdbStore(
            data_path / "data.lmdb",
            map_size=settings.lmdb_map_size,
            failure_policy=policy,
        ),
        "postgres": lambda: PostgresStore(
            failure_policy=policy,
            max_iterations=settings.postgres_max_iterations,
        ),
    }


def available_backends() -> List[str]:
    """List available backend names."""
    return sorted(_store_factories(get_settings()).keys())


def default_backends() -> List[str]:
    """Backends run by `all`, in configured order."""
    return get_settings().backend_names


def _resolve_names(names: Optional[Iterable[str]]) -> List[str]:
    resolved = list(names) if names is not None else ["all"]
    if len(resolved) == 1 and resolved[0] == "all":
        resolved = default_backends()
    known = available_backends()
    unknown = [name for name in resolved if name not in known]
    if unknown:
        raise ValueError(f"Unknown backend(s) {', '.join(unknown)}. Available: {', '.join(known)}")
    return resolved


def _close_store(store: Store) -> None:
    close = getattr(store, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception:  # noqa: BLE001 - best-effort cleanup must not mask the run's outcome
        log.exception(f"[CLOSE FAILED] {store.kind()}", extra={"kind": store.kind()})


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def run_backends(
    names: Optional[Iterable[str]] = None,
    max_iterations: Optional[int] = None,
    page_size: Optional[int] = None,
    results_dir: Path | str = "results",
    persist: bool = True,
    on_report: Optional[Callable[[BackendReport], None]] = None,
) -> List[dict]:
    """
    Run the benchmark over one or more backends and optionally persist the results.

    Parameters
    ----------
    names : iterable[str] | None
        Backend names to execute. If None or ["all"], runs the configured defaults.
    max_iterations : int | None
        Iteration cap before each backend's own constraint. Defaults to
        settings.benchmark_max_iterations.
    page_size : int | None
        Scan page size. Defaults to settings.benchmark_page_size.
    results_dir : Path | str
        Directory to store JSON artifacts.
    persist : bool
        Whether to write results to disk.
    on_report : callable | None
        Receives each backend's report as soon as it completes.

    Returns
    -------
    List[dict]
        One result dictionary per backend, in run order.

    Raises
    ------
    ContractViolation
        If a backend breaks the Store contract; stores are still closed.
    """
    settings = get_settings()
    config = DriverConfig(
        max_iterations=max_iterations or settings.benchmark_max_iterations,
        page_size=page_size or settings.benchmark_page_size,
    )
    resolved = _resolve_names(names)
    factories = _store_factories(settings)

    # Stores live for the whole run and are closed together at shutdown.
    stores: List[Store] = []
    try:
        for name in resolved:
            log.info(f"[OPEN] {name}", extra={"backend": name})
            stores.append(factories[name]())
        driver = BenchmarkDriver(config, on_report=on_report)
        reports = driver.run(stores)
    finally:
        for store in stores:
            _close_store(store)

    results = []
    for name, report in zip(resolved, reports):
        result = report.as_dict()
        result["backend"] = name
        results.append(result)

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "max_iterations": config.max_iterations,
        "page_size": config.page_size,
        "failure_policy": settings.failure_policy,
        "backends": resolved,
        "results": results,
    }

    if persist:
        _persist_results(payload, Path(results_dir))

    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(resolved)} backend(s) benchmarked",
        extra={"backends": resolved, "total_backends": len(resolved)},
    )

    return results


__all__ = [
    "available_backends",
    "default_backends",
    "run_backends",
]
