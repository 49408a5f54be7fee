"""Typer CLI: convert, summary, categories, init commands."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from oasjunit import __version__

app = typer.Typer(
    name="oas-junit",
    help="Convert OpenAPI lint results into JUnit XML for CI dashboards.",
    no_args_is_help=True,
)
console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"oas-junit v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """oas-junit - OpenAPI lint results as JUnit XML."""


def _load_checked_config(project_dir: Path) -> dict:
    from oasjunit.config import load_config, validate_config

    config = load_config(project_dir)
    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)
    return config


def _load_results(report_path: Path):
    from oasjunit.loader import ResultSetError, load_result_set

    try:
        return load_result_set(report_path)
    except ResultSetError as exc:
        console.print(f"[red]Could not load lint report:[/red] {exc}")
        raise typer.Exit(1)


def _build(result_set, started: datetime, args: list[str], config: dict) -> bytes:
    from oasjunit.exporters.junit import build_junit_report
    from oasjunit.rules import categories_from_config

    return build_junit_report(
        result_set,
        started,
        args,
        categories_from_config(config),
        suite_prefix=config["suite_prefix"],
        classname_prefix=config["classname_prefix"],
        max_name_length=config["max_name_length"],
    )


@app.command()
def convert(
    report_path: Path = typer.Argument(..., help="Lint report (JSON or YAML)"),
    output: Path = typer.Option(None, "--output", "-o", help="Write XML here instead of stdout"),
    file_name: str = typer.Option(
        None, "--file", "-f", help="File name for results without an origin (default: report path)"
    ),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Convert a lint report into a JUnit XML report."""
    started = datetime.now(timezone.utc)
    config = _load_checked_config(project_dir)
    result_set = _load_results(report_path)

    data = _build(result_set, started, [file_name or str(report_path)], config)
    if not data:
        console.print("[red]JUnit report generation failed; nothing written.[/red]")
        raise typer.Exit(1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        console.print(f"[green]JUnit report saved to:[/green] {output}")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()


@app.command()
def summary(
    report_path: Path = typer.Argument(..., help="Lint report (JSON or YAML)"),
    file_name: str = typer.Option(None, "--file", "-f", help="File name for results without an origin"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Show tests and failures per category as they would appear in the report."""
    from oasjunit.exporters.junit import parse_junit_report

    started = datetime.now(timezone.utc)
    config = _load_checked_config(project_dir)
    result_set = _load_results(report_path)

    data = _build(result_set, started, [file_name or str(report_path)], config)
    if not data:
        console.print("[red]JUnit report generation failed.[/red]")
        raise typer.Exit(1)
    report = parse_junit_report(data)

    table = Table(title="JUnit Summary", show_lines=True)
    table.add_column("Suite", width=40)
    table.add_column("Tests", justify="right")
    table.add_column("Failures", justify="right")
    for suite in report.testsuites:
        fail_style = "red" if suite.failures else "green"
        table.add_row(suite.name, str(suite.tests), f"[{fail_style}]{suite.failures}[/{fail_style}]")

    console.print(table)
    console.print(
        f"\n[bold]Results:[/bold] {report.tests} tests, "
        f"[red]{report.failures} failures[/red] across {len(report.testsuites)} suites"
    )


@app.command()
def categories(
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """List rule categories in report order."""
    from oasjunit.rules import categories_from_config

    config = _load_checked_config(project_dir)

    table = Table(title="Rule Categories")
    table.add_column("#", justify="right", width=3)
    table.add_column("ID", width=16)
    table.add_column("Suite Name", width=40)
    for idx, cat in enumerate(categories_from_config(config), start=1):
        table.add_row(str(idx), cat.id, f"{config['suite_prefix']} - {cat.name}")
    console.print(table)


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Write a default .oasjunit/config.json in the project."""
    from oasjunit.config import CONFIG_DIR, CONFIG_FILE, DEFAULT_CONFIG, save_config, validate_config
    from oasjunit.utils import deep_merge, load_json

    console.print(Panel("[bold]oas-junit Init[/bold]", style="blue"))

    config_path = project_dir / CONFIG_DIR / CONFIG_FILE
    if config_path.exists() and not force:
        config = deep_merge(DEFAULT_CONFIG, load_json(config_path))
        console.print("  [yellow]Merged with existing config[/yellow]")
    else:
        config = DEFAULT_CONFIG.copy()
        console.print("  [green]Created default config[/green]")

    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, project_dir)
    console.print(f"  Config: [cyan]{config_path}[/cyan]")
    console.print(f"  Categories: {len(config['categories'])}")
