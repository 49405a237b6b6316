"""
Benchmark driver: exercises every Store identically and times each phase.

Per backend the driver walks a fixed state sequence

    INIT -> WRITE -> READ -> SCAN -> DELETE -> DONE

over a deterministic key space. READ and SCAN double as correctness checks:
a backend that loses a write, returns a stale value, or breaks the pagination
protocol raises `ContractViolation` and stops the run.

Usage:
    from kvbench.driver import BenchmarkDriver, DriverConfig

    driver = BenchmarkDriver(DriverConfig(max_iterations=10_000, page_size=50))
    reports = driver.run([MemoryStore(), SqliteStore("db/data.sqlite")])
"""

from __future__ import annotations

import enum
import hashlib
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from kvbench.domain.exceptions import ContractViolation
from kvbench.stores.abstract import Store
from kvbench.utils.logging import get_logger
from kvbench.utils.profiler import ProfileStats, profile_block
from kvbench.utils.timer import Timer

log = get_logger(__name__)

VALUE_OFFSET = 1000


def get_key(i: int) -> str:
    """
    Derive a stable key from an integer.

    Name-based (MD5, version 3) UUID of the decimal string, without a
    namespace, so the same `i` always yields the same 36-character key.
    """
    digest = hashlib.md5(str(i).encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest, version=3))


def get_value(i: int) -> str:
    """Value stored under `get_key(i)`: itself a key, offset by 1000."""
    return get_key(i + VALUE_OFFSET)


class Phase(str, enum.Enum):
    INIT = "init"
    WRITE = "write"
    READ = "read"
    SCAN = "scan"
    DELETE = "delete"
    DONE = "done"


PHASE_LABELS = {
    Phase.WRITE: "Writes",
    Phase.READ: "Reads",
    Phase.SCAN: "Scan",
    Phase.DELETE: "Deletes",
}


@dataclass(frozen=True)
class DriverConfig:
    """Explicit run constants; nothing is read from process-wide state."""

    max_iterations: int = 100_000
    page_size: int = 50

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")


@dataclass
class BackendReport:
    """Timings and counters for one backend's completed run."""

    kind: str
    iterations: int
    total: Timer
    phases: Dict[Phase, Timer] = field(default_factory=dict)
    scanned: int = 0
    pages: int = 0
    failures: int = 0
    verified: bool = True
    profile: Optional[ProfileStats] = None

    def lines(self) -> List[str]:
        """Header plus one summary line per phase and the total."""
        out = [f"{self.kind} ({self.iterations:,})"]
        out.extend(str(timer) for timer in self.phases.values())
        out.append(str(self.total))
        return out

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "iterations": self.iterations,
            "phases": {phase.value: timer.as_dict() for phase, timer in self.phases.items()},
            "total": self.total.as_dict(),
            "scanned": self.scanned,
            "pages": self.pages,
            "failures": self.failures,
            "verified": self.verified,
            "profile": self.profile.as_dict() if self.profile else None,
        }


class BenchmarkDriver:
    """
    Runs the write/read/scan/delete sequence against each store in turn.

    Parameters
    ----------
    config : DriverConfig
        Maximum iteration count and scan page size.
    on_report : Callable[[BackendReport], None] | None
        Called with each backend's report as soon as that backend finishes,
        before the next backend starts.
    """

    def __init__(
        self,
        config: Optional[DriverConfig] = None,
        on_report: Optional[Callable[[BackendReport], None]] = None,
    ) -> None:
        self.config = config or DriverConfig()
        self.on_report = on_report

    def run(self, stores: Iterable[Store]) -> List[BackendReport]:
        reports: List[BackendReport] = []
        for store in stores:
            report = self.run_store(store)
            reports.append(report)
            if self.on_report is not None:
                self.on_report(report)
        return reports

    def run_store(self, store: Store) -> BackendReport:
        kind = store.kind()
        verify = getattr(store, "verify", True)

        self._enter(kind, Phase.INIT)
        iters = store.constrain_iterations(self.config.max_iterations)
        log.info(
            f"[BACKEND START] {kind}",
            extra={"kind": kind, "iterations": iters, "page_size": self.config.page_size},
        )
        if not verify:
            log.warning(
                f"[VERIFY OFF] {kind} is timed without correctness checks", extra={"kind": kind}
            )

        with profile_block(kind) as stats:
            report = BackendReport(
                kind=kind, iterations=iters, total=Timer(kind, iters * 4), verified=verify
            )

            self._enter(kind, Phase.WRITE)
            timer = Timer(PHASE_LABELS[Phase.WRITE], iters)
            self._write(store, iters)
            timer.stop()
            report.phases[Phase.WRITE] = timer

            self._enter(kind, Phase.READ)
            timer = Timer(PHASE_LABELS[Phase.READ], iters)
            self._read(store, iters, kind, verify)
            timer.stop()
            report.phases[Phase.READ] = timer

            self._enter(kind, Phase.SCAN)
            timer = Timer(PHASE_LABELS[Phase.SCAN], iters)
            report.scanned, report.pages = self._scan(store, kind, verify)
            timer.stop()
            report.phases[Phase.SCAN] = timer
            if verify and report.scanned != iters:
                raise ContractViolation(
                    kind, Phase.SCAN.value, f"scanned {report.scanned} entries, expected {iters}"
                )

            self._enter(kind, Phase.DELETE)
            timer = Timer(PHASE_LABELS[Phase.DELETE], iters)
            self._delete(store, iters)
            timer.stop()
            report.phases[Phase.DELETE] = timer

            report.total.stop()

        report.profile = stats
        report.failures = getattr(store, "failures", 0)
        self._enter(kind, Phase.DONE)
        log.info(
            f"[BACKEND COMPLETE] {kind}",
            extra={
                "kind": kind,
                "iterations": iters,
                "duration_ms": report.total.duration(),
                "failures": report.failures,
            },
        )
        return report

    def _enter(self, kind: str, phase: Phase) -> None:
        log.debug(f"[PHASE] {kind} -> {phase.name}", extra={"kind": kind, "phase": phase.value})

    @staticmethod
    def _write(store: Store, iters: int) -> None:
        for i in range(iters):
            store.put(get_key(i), get_value(i))

    @staticmethod
    def _read(store: Store, iters: int, kind: str, verify: bool) -> None:
        for i in range(iters):
            value = store.get(get_key(i))
            if verify and value != get_value(i):
                raise ContractViolation(
                    kind,
                    Phase.READ.value,
                    f"get({get_key(i)!r}) returned {value!r}, expected {get_value(i)!r}",
                )

    def _scan(self, store: Store, kind: str, verify: bool) -> Tuple[int, int]:
        """Follow the cursor protocol to exhaustion; return (entries, pages)."""
        page_size = self.config.page_size
        cursor: Optional[str] = None
        count = 0
        pages = 0
        while True:
            items = store.scan_page(cursor, page_size)
            pages += 1
            count += len(items)
            if verify:
                self._check_page(kind, cursor, [item.key for item in items], page_size)
            if items:
                cursor = items[-1].key
            if len(items) < page_size:
                return count, pages

    @staticmethod
    def _check_page(kind: str, cursor: Optional[str], keys: List[str], page_size: int) -> None:
        # Keys must ascend strictly and start beyond the cursor; otherwise a
        # duplicate or a re-returned cursor row would slip past the count check.
        if len(keys) > page_size:
            raise ContractViolation(
                kind, Phase.SCAN.value, f"page of {len(keys)} entries exceeds page size {page_size}"
            )
        previous = cursor
        for key in keys:
            if previous is not None and key <= previous:
                raise ContractViolation(
                    kind,
                    Phase.SCAN.value,
                    f"key {key!r} does not sort after {previous!r} (cursor={cursor!r})",
                )
            previous = key

    @staticmethod
    def _delete(store: Store, iters: int) -> None:
        for i in range(iters):
            store.delete(get_key(i))


__all__ = [
    "BackendReport",
    "BenchmarkDriver",
    "DriverConfig",
    "Phase",
    "get_key",
    "get_value",
]
