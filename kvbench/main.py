from __future__ import annotations

import json
import sys
from typing import List, Optional

import typer

from kvbench.config import get_settings
from kvbench.domain.exceptions import ContractViolation
from kvbench.orchestrator import available_backends, default_backends, run_backends
from kvbench.reporter import print_backend_report, print_results
from kvbench.utils.logging import configure_logging

app = typer.Typer(help="KV Throughput Bench CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"iterations={settings.benchmark_max_iterations} page_size={settings.benchmark_page_size} "
        f"backends={','.join(settings.backend_names)} failure_policy={settings.failure_policy} "
        f"data_dir={settings.data_dir}"
    )


@app.command(name="list")
def list_backends() -> None:
    """
    List registered backends; the default run set is marked with '*'.
    """
    defaults = set(default_backends())
    for name in available_backends():
        marker = "*" if name in defaults else " "
        typer.echo(f"{marker} {name}")


@app.command()
def run(
    backend: Optional[List[str]] = typer.Option(
        None,
        "--backend",
        "-b",
        help="Backend to run; repeat for several (noop, memory, sqlite, lmdb, postgres, all).",
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        "-n",
        min=1,
        help="Override maximum iteration count (default from settings).",
    ),
    page_size: Optional[int] = typer.Option(
        None,
        "--page-size",
        "-p",
        min=1,
        help="Override scan page size (default from settings).",
    ),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write results/*.json."),
    as_json: bool = typer.Option(False, "--json", help="Print the full results as JSON."),
) -> None:
    """
    Benchmark the selected backends and print per-phase throughput.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    names = backend or ["all"]

    try:
        results = run_backends(
            names=names,
            max_iterations=iterations,
            page_size=page_size,
            persist=persist,
            on_report=print_backend_report,
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    except ContractViolation as exc:
        typer.echo(f"Contract violation: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(results, indent=2))
    else:
        print_results(results)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
