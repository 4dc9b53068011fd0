#!/usr/bin/env python3
"""
jsontest CLI - JSON Path Assertions

Usage:
    jsontest run <suite.yaml> [--document data.json] [OPTIONS]
    jsontest validate <suite.yaml>
    jsontest query <data.json> <path>
    jsontest --version
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .errors import PathSyntaxError, SuiteLoadError
from .path import compile_path, evaluate
from .reporting import CheckStatus
from .runner import run_suite
from .suites import load_document, load_suite
from .assertions.formatting import from_unmatched
from .values import render_value

app = typer.Typer(
    name="jsontest",
    help="🔎 jsontest - Fluent assertions for JSON documents",
    add_completion=False,
)
console = Console()

_CHECK_ICONS = {
    CheckStatus.PASSED: "[green]✅[/green]",
    CheckStatus.FAILED: "[red]❌[/red]",
    CheckStatus.ERROR: "[yellow]⚠️[/yellow]",
    CheckStatus.SKIPPED: "⏭️",
}


def version_callback(value: bool):
    if value:
        console.print(f"🔎 jsontest v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l",
        help="Logging level: DEBUG, INFO, WARNING or ERROR"
    ),
):
    """
    🔎 jsontest - Fluent assertions for JSON documents

    Check JSON documents against declarative YAML suites.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    document: Optional[Path] = typer.Option(
        None, "--document", "-d",
        help="JSON document to check (overrides the suite's 'document')"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show failures and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
):
    """
    Run a check suite against a JSON document.

    Every check is evaluated; the exit code is 0 only if all of them pass.
    """
    quiet = quiet or output == "json"

    if not quiet:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)
    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=1)

    document_path = document or suite.document_path()
    if document_path is None:
        console.print("[red]❌ No document to check.[/red] Pass --document or set 'document:' in the suite")
        raise typer.Exit(code=1)

    try:
        data = load_document(document_path)
    except SuiteLoadError as e:
        console.print(f"❌ {e}", style="red", markup=False)
        raise typer.Exit(code=1)

    if not quiet:
        console.print(f"   [green]✅ Valid suite:[/green] {suite.name} ({len(suite.checks)} checks)")
        console.print(f"   Document: {document_path}\n")

    def show_progress(check, reporter):
        record = reporter.report.get_check(check.id)
        if output == "json" or (quiet and record.status != CheckStatus.FAILED):
            return
        console.print(f"{_CHECK_ICONS.get(record.status, '?')} [bold]{escape(check.id)}[/bold] {escape(check.path)}")
        if record.failure_message and record.status == CheckStatus.FAILED:
            for line in record.failure_message.splitlines():
                console.print(f"     {line}", markup=False, highlight=False)
        elif record.error_message:
            console.print(f"     Error: {record.error_message}", markup=False)

    reporter = run_suite(suite, data, document_name=str(document_path), on_check=show_progress)
    report = reporter.report

    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + report.summary(), markup=False)

    if not no_report:
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if not quiet:
            console.print(f"\n📁 Report saved: {report_path}")

    raise typer.Exit(code=0 if report.status.value == "passed" else 1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file without running it.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Valid suite:[/green] {suite.name}")
    console.print(f"   Checks: {len(suite.checks)}")
    if suite.document:
        console.print(f"   Document: {suite.document}")

    table = Table(title="Checks")
    table.add_column("ID", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Expectations")

    for check in suite.checks:
        table.add_row(
            Text(check.id),
            Text(compile_path(check.path).canonical()),
            ", ".join(e.op.value for e in check.expect),
        )

    console.print()
    console.print(table)


@app.command()
def query(
    document_file: Path = typer.Argument(
        ...,
        help="JSON document to query",
        exists=True,
        readable=True,
    ),
    expression: str = typer.Argument(..., help="Path expression, e.g. '$.users[*].name'"),
):
    """
    Show every value a path expression resolves to.
    """
    try:
        data = load_document(document_file)
        compiled = compile_path(expression)
    except (SuiteLoadError, PathSyntaxError) as e:
        console.print(f"❌ {e}", style="red", markup=False)
        raise typer.Exit(code=1)

    result = evaluate(data, compiled)
    if not result.matched:
        console.print("[red]❌ No match[/red]")
        console.print(from_unmatched(result).render(), markup=False, highlight=False)
        raise typer.Exit(code=1)

    table = Table(title=f"{len(result)} match(es) for {compiled.canonical()}")
    table.add_column("Path", style="cyan")
    table.add_column("Value")
    for match in result.matches:
        table.add_row(Text(str(match.path)), Text(render_value(match.value, max_length=120)))
    console.print(table)


@app.command()
def info():
    """
    Show information about jsontest.
    """
    console.print(f"""
🔎 [bold]jsontest[/bold] v{__version__}

Fluent assertions for JSON documents

[bold]Path syntax:[/bold]
  $            document root
  .name        object property ( ['name'] for any key )
  [0] [-1]     array index (negative counts from the end)
  [*] .*       every child
  ..name       recursive descent

[bold]Quick Start:[/bold]
  jsontest run checks.yaml --document response.json
  jsontest validate checks.yaml
  jsontest query response.json '$.users[*].email'
""")


if __name__ == "__main__":
    app()
