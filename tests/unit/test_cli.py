from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from kvbench import main

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_reconfiguration(monkeypatch):
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: None)


def test_list_marks_default_backends() -> None:
    result = runner.invoke(main.app, ["list"])

    assert result.exit_code == 0
    assert "* memory" in result.output
    assert "  postgres" in result.output


def test_info_shows_effective_settings() -> None:
    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "page_size=50" in result.output


def test_run_prints_phase_lines() -> None:
    result = runner.invoke(main.app, ["run", "-b", "memory", "-n", "20", "--no-persist"])

    assert result.exit_code == 0, result.output
    assert "MapStore (20)" in result.output
    for label in ["Writes: 20", "Reads: 20", "Scan: 20", "Deletes: 20", "MapStore: 80"]:
        assert label in result.output


def test_run_json_output(tmp_path) -> None:
    result = runner.invoke(
        main.app, ["run", "-b", "noop", "-b", "memory", "-n", "5", "--no-persist", "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output[result.output.index("[\n") :])
    assert [r["backend"] for r in payload] == ["noop", "memory"]


def test_run_unknown_backend_exits_with_usage_error() -> None:
    result = runner.invoke(main.app, ["run", "-b", "rocks", "--no-persist"])

    assert result.exit_code == 2
