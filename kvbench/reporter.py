from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from kvbench.driver import BackendReport, Phase

TIMED_PHASES = (Phase.WRITE, Phase.READ, Phase.SCAN, Phase.DELETE)


def print_backend_report(report: BackendReport, console: Optional[Console] = None) -> None:
    """
    Print one backend's header and per-phase summary lines as soon as it completes.

    Lines follow `<label>: <count> duration: <ms> ms rate: <ops/sec> ops/sec`.
    """
    console = console or Console()
    header, *lines = report.lines()
    console.print(f"[bold cyan]{header}[/bold cyan]", highlight=False)
    for line in lines:
        console.print(line, highlight=False, markup=False)
    if report.failures:
        console.print(
            f"\t[yellow]{report.failures:,} backend operation(s) failed and were skipped[/yellow]"
        )
    if not report.verified:
        console.print("\t[dim]correctness checks disabled for this backend[/dim]")


def _rate_str(phase: Optional[Dict[str, Any]]) -> str:
    if not phase:
        return "N/A"
    rate = phase.get("rate_ops_per_sec")
    if rate is None or (isinstance(rate, float) and math.isinf(rate)):
        return "inf"
    return f"{rate:,.2f}"


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render a run's per-backend results as a rich table.

    Expects the dictionaries returned by `run_backends`.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="KV Throughput Bench Results",
        box=box.ROUNDED,
        caption="Sorted by total rate (descending)",
    )

    table.add_column("Backend", style="cyan", no_wrap=True)
    table.add_column("Iterations", justify="right", style="magenta")
    for phase in TIMED_PHASES:
        table.add_column(f"{phase.value.title()} (ops/s)", justify="right", style="green")
    table.add_column("Total (ms)", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("Failures", justify="right", style="red")

    def get_sort_key(r: Dict[str, Any]) -> float:
        rate = r["total"].get("rate_ops_per_sec")
        return math.inf if rate is None else rate

    for res in sorted(results, key=get_sort_key, reverse=True):
        phases = res.get("phases", {})
        profile = res.get("profile") or {}
        mem_bytes = profile.get("peak_rss_bytes") or 0
        table.add_row(
            res.get("kind", "Unknown"),
            f"{res.get('iterations', 0):,}",
            *(_rate_str(phases.get(phase.value)) for phase in TIMED_PHASES),
            f"{res['total']['duration_ms']:,}",
            f"{mem_bytes / (1024 * 1024):.2f}",
            f"{res.get('failures', 0):,}",
        )

    console.print(table)
