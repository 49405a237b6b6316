from __future__ import annotations

from typing import List, Optional

import pytest

from kvbench.domain.exceptions import ContractViolation
from kvbench.domain.models import Entry
from kvbench.driver import BackendReport, BenchmarkDriver, DriverConfig, Phase, get_key, get_value
from kvbench.stores import MemoryStore, NoopStore

ITERATIONS = 40
PAGE_SIZE = 6
CAPPED_ITERATIONS = 15


class _RecordingStore(MemoryStore):
    """Memory store that records the order of contract calls."""

    name = "Recording"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.calls: List[str] = []

    def constrain_iterations(self, requested: int) -> int:
        self.calls.append("constrain")
        return super().constrain_iterations(requested)

    def _put(self, key: str, value: str) -> None:
        self.calls.append("put")
        super()._put(key, value)

    def _get(self, key: str) -> Optional[str]:
        self.calls.append("get")
        return super()._get(key)

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        self.calls.append("scan")
        return super()._scan_page(cursor, page_size)

    def _delete(self, key: str) -> None:
        self.calls.append("delete")
        super()._delete(key)


class _LossyStore(MemoryStore):
    name = "Lossy"

    def _put(self, key: str, value: str) -> None:
        if key == get_key(3):
            return
        super()._put(key, value)


class _CursorInclusiveStore(MemoryStore):
    """Returns the cursor's own row again, the classic `>=` pagination bug."""

    name = "CursorInclusive"

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        keys = sorted(self._data)
        if cursor is not None:
            keys = [k for k in keys if k >= cursor]
        return [Entry(key=k, value=self._data[k]) for k in keys[:page_size]]


class _UnsortedStore(MemoryStore):
    name = "Unsorted"

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        page = super()._scan_page(cursor, page_size)
        return list(reversed(page))


class _ShortPageStore(MemoryStore):
    """Signals exhaustion too early by returning a short first page."""

    name = "ShortPage"

    def _scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        return super()._scan_page(cursor, page_size - 1)


def test_get_key_matches_name_based_uuid() -> None:
    assert get_key(0) == "cfcd2084-95d5-35ef-a6e7-dff9f98764da"
    assert get_key(7) == get_key(7)
    assert len({get_key(i) for i in range(1000)}) == 1000


def test_value_is_key_offset_by_one_thousand() -> None:
    assert get_value(5) == get_key(1005)


def test_driver_config_rejects_non_positive_values() -> None:
    with pytest.raises(ValueError):
        DriverConfig(max_iterations=0)
    with pytest.raises(ValueError):
        DriverConfig(page_size=0)


def test_run_store_reports_every_phase() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=ITERATIONS, page_size=PAGE_SIZE))
    store = MemoryStore()

    report = driver.run_store(store)

    assert report.kind == "MapStore"
    assert report.iterations == ITERATIONS
    assert list(report.phases) == [Phase.WRITE, Phase.READ, Phase.SCAN, Phase.DELETE]
    assert all(timer.stopped for timer in report.phases.values())
    assert report.total.stopped
    assert report.total.expected_count == ITERATIONS * 4
    assert report.scanned == ITERATIONS
    # 40 entries in pages of 6: six full pages, then a short one of 4
    assert report.pages == 7
    assert report.failures == 0
    assert report.verified is True
    assert report.profile is not None
    assert len(store) == 0


def test_phases_run_in_strict_sequence() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=5, page_size=2))
    store = _RecordingStore()

    driver.run_store(store)

    assert store.calls == ["constrain"] + ["put"] * 5 + ["get"] * 5 + ["scan"] * 3 + ["delete"] * 5


def test_constrained_iterations_bound_every_phase() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=ITERATIONS, page_size=PAGE_SIZE))
    store = _RecordingStore(max_iterations=CAPPED_ITERATIONS)

    report = driver.run_store(store)

    assert report.iterations == CAPPED_ITERATIONS
    assert store.calls.count("put") == CAPPED_ITERATIONS
    assert store.calls.count("get") == CAPPED_ITERATIONS
    assert store.calls.count("delete") == CAPPED_ITERATIONS
    assert all(t.expected_count == CAPPED_ITERATIONS for t in report.phases.values())


def test_report_lines_follow_output_format() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=ITERATIONS, page_size=PAGE_SIZE))

    lines = driver.run_store(MemoryStore()).lines()

    assert lines[0] == f"MapStore ({ITERATIONS})"
    labels = ["Writes", "Reads", "Scan", "Deletes", "MapStore"]
    for line, label in zip(lines[1:], labels):
        assert line.startswith(f"\t{label}: ")
        assert " duration: " in line
        assert line.endswith(" ops/sec")
    assert lines[-1].startswith(f"\tMapStore: {ITERATIONS * 4} ")


def test_run_emits_each_report_before_next_backend() -> None:
    events: List[str] = []

    class _Tracking(_RecordingStore):
        def __init__(self, label: str) -> None:
            super().__init__()
            self.label = label

        def kind(self) -> str:
            return self.label

        def _put(self, key: str, value: str) -> None:
            if not events or events[-1] != f"start {self.label}":
                events.append(f"start {self.label}")
            super()._put(key, value)

    def on_report(report: BackendReport) -> None:
        events.append(f"report {report.kind}")

    driver = BenchmarkDriver(DriverConfig(max_iterations=3, page_size=2), on_report=on_report)
    reports = driver.run([_Tracking("first"), _Tracking("second")])

    assert [r.kind for r in reports] == ["first", "second"]
    assert events == ["start first", "report first", "start second", "report second"]


def test_read_mismatch_is_a_contract_violation() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=10, page_size=4))

    with pytest.raises(ContractViolation) as excinfo:
        driver.run_store(_LossyStore())

    assert excinfo.value.kind == "Lossy"
    assert excinfo.value.phase == Phase.READ.value


def test_cursor_reinclusion_is_detected() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=10, page_size=4))

    with pytest.raises(ContractViolation, match="does not sort after") as excinfo:
        driver.run_store(_CursorInclusiveStore())

    assert excinfo.value.phase == Phase.SCAN.value


def test_unsorted_page_is_detected() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=10, page_size=4))

    with pytest.raises(ContractViolation, match="does not sort after"):
        driver.run_store(_UnsortedStore())


def test_early_short_page_fails_count_check() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=10, page_size=4))

    with pytest.raises(ContractViolation, match="scanned 3 entries, expected 10"):
        driver.run_store(_ShortPageStore())


def test_noop_store_runs_without_verification() -> None:
    driver = BenchmarkDriver(DriverConfig(max_iterations=ITERATIONS, page_size=PAGE_SIZE))

    report = driver.run_store(NoopStore())

    assert report.verified is False
    assert report.scanned == 0
    assert report.pages == 1
    assert len(report.phases) == 4


def test_report_as_dict_is_serialisable() -> None:
    import json

    driver = BenchmarkDriver(DriverConfig(max_iterations=5, page_size=2))

    payload = driver.run_store(MemoryStore()).as_dict()

    assert set(payload["phases"]) == {"write", "read", "scan", "delete"}
    assert payload["total"]["count"] == 20
    json.dumps(payload)
