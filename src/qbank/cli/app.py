# src/qbank/cli/app.py
"""Command-line interface for qbank.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

try:
    import typer
    from rich.console import Console
    from rich.markdown import Markdown
    from rich.panel import Panel
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
    from rich.table import Table
except ImportError as e:
    raise SystemExit(
        "CLI requires additional dependencies.\nInstall with: pip install qbank-rag[cli]"
    ) from e

from qbank import __version__
from qbank.commands import (
    ProgressUpdate,
    delete,
    ingest,
    intent_cmd,
    list_cmd,
    query,
    status,
)
from qbank.commands.base import ConfirmRequest, IngestResult
from qbank.config import load_env_file
from qbank.log import configure_logging
from qbank.models import VerificationReport

app = typer.Typer(
    name="qbank",
    help="qbank - question-bank retrieval for grounded question generation.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"qbank {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (default: $QBANK_LOG_LEVEL or WARNING).",
    ),
) -> None:
    """qbank - question-bank retrieval for grounded question generation."""
    load_env_file()
    configure_logging(log_level, console=Console(stderr=True))


def _fail(error: str | None) -> None:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _render_verification(report: VerificationReport, plain: bool) -> None:
    for message in report.errors:
        console.print(f"ERROR: {message}" if plain else f"[red]ERROR:[/red] {message}")
    for message in report.warnings:
        console.print(f"WARNING: {message}" if plain else f"[yellow]WARNING:[/yellow] {message}")

    if plain:
        console.print(f"Total questions: {report.total}")
        console.print(f"Errors: {len(report.errors)}")
        console.print(f"Warnings: {len(report.warnings)}")
        for title, counts in (
            ("By Grade Level", report.by_grade),
            ("By Topic", report.by_topic),
            ("By Difficulty", report.by_difficulty),
        ):
            console.print(f"{title}:")
            for key, count in counts.items():
                console.print(f"  {key}: {count}")
        return

    table = Table(title="Verification Report")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total questions", str(report.total))
    table.add_row("Errors", str(len(report.errors)))
    table.add_row("Warnings", str(len(report.warnings)))
    console.print(table)

    for title, counts in (
        ("By Grade Level", report.by_grade),
        ("By Topic", report.by_topic),
        ("By Difficulty", report.by_difficulty),
    ):
        if not counts:
            continue
        breakdown = Table(title=title)
        breakdown.add_column("Value", style="cyan")
        breakdown.add_column("Questions", justify="right", style="green")
        for key, count in counts.items():
            breakdown.add_row(key, str(count))
        console.print(breakdown)


def _render_ingest_result(result: IngestResult, plain: bool) -> None:
    """Render ingest result to console."""
    report = result.report
    if report is None:
        _fail(result.error)
        return

    for filepath, message in report.failed_files.items():
        console.print(f"Failed {filepath}: {message}" if plain else f"[red]Failed {filepath}:[/red] {message}")

    _render_verification(report.verification, plain)

    if report.verify_only and report.verification.ok:
        console.print()
        console.print("Verification complete. No errors found.")
        console.print("To upload, run without --verify-only.")

    if report.deleted is not None:
        if report.deleted:
            console.print(f"Deleted existing records in '{report.namespace}'")
        else:
            console.print("[yellow]WARNING: Failed to delete existing records[/yellow]")

    if report.upsert is not None:
        upsert = report.upsert
        console.print()
        if plain:
            console.print(f"Uploaded: {upsert.succeeded}")
            if upsert.failed:
                console.print(f"Failed: {upsert.failed}")
        else:
            console.print(f"[green]Uploaded {upsert.succeeded} records to '{report.namespace}'[/green]")
            if upsert.failed:
                console.print(f"[red]Failed: {upsert.failed}[/red]")
        for message in upsert.errors:
            console.print(f"  - {message}")
        if report.records_after is not None:
            console.print(f"Records in namespace: {report.records_after}")

    if not result.success:
        _fail(result.error)


@app.command(name="ingest")
def ingest_cmd(
    path: str = typer.Argument(..., help="Question-bank file or directory"),
    config_file: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Target namespace"),
    delete_first: bool = typer.Option(
        False,
        "--delete-first",
        help="Delete all existing records in the namespace before uploading",
    ),
    verify_only: bool = typer.Option(
        False,
        "--verify-only",
        help="Only parse and verify, don't upload",
    ),
    file_filter: str = typer.Option(
        None,
        "--file",
        "-f",
        help="Process only the file whose name contains this text",
    ),
    settle: float = typer.Option(
        0.0,
        "--settle",
        help="Seconds to wait after --delete-first before uploading",
    ),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """Parse, verify and upload question-bank markdown files."""
    show_progress = not plain and console.is_terminal

    if not show_progress:
        result = ingest.ingest(
            path=path,
            config_path=config_file,
            namespace=namespace,
            delete_first=delete_first,
            verify_only=verify_only,
            file_filter=file_filter,
            settle_seconds=settle,
        )
        _render_ingest_result(result, plain=plain)
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[stage]:>10}", justify="right"),
        BarColumn(bar_width=20),
        TextColumn("{task.description}", style="dim"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("", total=None, stage="")

        def on_progress(update: ProgressUpdate) -> None:
            progress.update(
                task,
                stage=update.stage.value,
                description=update.message or "",
                total=update.total or None,
                completed=update.current,
            )

        result = ingest.ingest(
            path=path,
            config_path=config_file,
            namespace=namespace,
            delete_first=delete_first,
            verify_only=verify_only,
            file_filter=file_filter,
            settle_seconds=settle,
            on_progress=on_progress,
        )

    _render_ingest_result(result, plain=False)


@app.command(name="query")
def query_cmd(
    text: str = typer.Argument(..., help="Request, e.g. 'Give me a P2 fractions question'"),
    config_file: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Namespace to search"),
    k: int = typer.Option(None, "--k", "-k", help="Number of examples to return"),
    raw: bool = typer.Option(
        False,
        "--raw",
        "-r",
        help="Show matched records instead of the formatted prompt context",
    ),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """Retrieve example questions for a request."""
    result = query.query(text=text, config_path=config_file, namespace=namespace, k=k)

    if not result.success:
        _fail(result.error)

    if not result.examples:
        if plain:
            console.print("No examples retrieved.")
        else:
            console.print("[yellow]No examples retrieved.[/yellow]")
        raise typer.Exit(0)

    if raw:
        if plain:
            for i, ex in enumerate(result.examples, 1):
                console.print(f"[{i}] {ex.id} (score: {ex.score:.3f}) {ex.text}")
            return
        table = Table(title=f"Matches ({len(result.examples)})")
        table.add_column("#", style="dim", width=3)
        table.add_column("Id", style="cyan")
        table.add_column("Score", justify="right", style="green")
        table.add_column("Grade")
        table.add_column("Topic")
        table.add_column("Difficulty")
        table.add_column("Question")
        for i, ex in enumerate(result.examples, 1):
            table.add_row(
                str(i), ex.id, f"{ex.score:.3f}", ex.grade_level, ex.topic, ex.difficulty, ex.text
            )
        console.print(table)
        return

    if plain:
        console.print(result.context)
    else:
        console.print(Panel(Markdown(result.context), title="Context", border_style="green"))


@app.command(name="intent")
def intent_command(
    text: str = typer.Argument(..., help="Request to classify"),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """Show how a request is classified (no network calls)."""
    result = intent_cmd.intent(text)
    intent = result.intent
    if intent is None:
        _fail(result.error)
        return

    rows = [
        ("Wants questions", str(intent.wants_questions)),
        ("Grade level", intent.grade_level.value if intent.grade_level else "-"),
        ("Topic", intent.topic or "-"),
        ("Wants visual hints", str(intent.wants_visual_hints)),
        ("Keywords version", result.keywords_version),
    ]
    if plain:
        for name, value in rows:
            console.print(f"{name}: {value}")
        return

    table = Table(title="Detected Intent")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


@app.command(name="status")
def status_cmd(
    config_file: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """Show configuration and index statistics."""
    result = status.status(config_path=config_file)

    if not result.success and not result.backend:
        _fail(result.error)

    rows = [
        ("Backend", result.backend),
        ("Index", result.location or "-"),
        ("Namespace", result.namespace),
        ("Embedding model", result.embedding_model),
        ("Embedding configured", "yes" if result.embedding_configured else "no"),
        ("Vector store configured", "yes" if result.store_configured else "no"),
    ]
    if result.success and result.store_configured:
        rows += [
            ("Records in namespace", str(result.namespace_records)),
            ("Total records", str(result.total_records)),
            ("Dimension", str(result.dimension) if result.dimension else "-"),
        ]

    if plain:
        console.print("Status:")
        for name, value in rows:
            console.print(f"  {name}: {value}")
    else:
        table = Table(title="qbank Status")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        for name, value in rows:
            table.add_row(name, value)
        console.print(table)

    if not result.success:
        _fail(result.error)


@app.command(name="list")
def list_cmd_(
    config_file: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Namespace to list"),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """List all record ids in the namespace."""
    result = list_cmd.list_ids(config_path=config_file, namespace=namespace)

    if not result.success:
        _fail(result.error)

    if not result.ids:
        if plain:
            console.print("No records.")
        else:
            console.print(f"[dim]No records in '{result.namespace}'.[/dim]")
        raise typer.Exit(0)

    if plain:
        for record_id in result.ids:
            console.print(record_id)
        return

    table = Table(title=f"Records in '{result.namespace}' ({len(result.ids)})")
    table.add_column("Id", style="cyan")
    for record_id in result.ids:
        table.add_row(record_id)
    console.print(table)


@app.command(name="delete")
def delete_cmd(
    ids: list[str] = typer.Argument(None, help="Record ids to delete"),
    delete_all: bool = typer.Option(False, "--all", help="Delete every record in the namespace"),
    config_file: str = typer.Option(None, "--config", "-c", help="Path to config file"),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Namespace to delete from"),
    force: bool = typer.Option(False, "--force", "-y", help="Skip confirmation"),
    plain: bool = typer.Option(False, "--plain", help="Plain output (no colors/formatting)"),
) -> None:
    """Delete records by id, or the whole namespace with --all."""

    def confirm(request: ConfirmRequest) -> bool:
        return typer.confirm(request.message)

    result = delete.delete(
        ids=ids or [],
        delete_all=delete_all,
        config_path=config_file,
        namespace=namespace,
        on_confirm=None if force else confirm,
    )

    if not result.success:
        _fail(result.error)

    if result.cancelled:
        console.print("Cancelled.")
        raise typer.Exit(0)

    if result.deleted_all:
        message = f"Deleted all records in '{result.namespace}'"
    else:
        message = f"Deleted {len(result.ids)} records from '{result.namespace}'"
    console.print(message if plain else f"[green]{message}[/green]")
