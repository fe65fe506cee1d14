"""Command line interface for SigCheck."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from sigcheck.config import AppConfig
from sigcheck.ingestion.manifest_loader import ManifestError, load_manifest
from sigcheck.models import CheckStatus
from sigcheck.reconcile.reconciler import reconcile
from sigcheck.report import filter_results, summarize, write_text_report
from sigcheck.utils.files import compute_crc32


console = Console()
app = typer.Typer(help="SigCheck - reconcile a submission manifest against a directory")

STATUS_STYLES = {
    CheckStatus.SUCCESS: "green",
    CheckStatus.WARNING: "yellow",
    CheckStatus.ERROR: "red",
    CheckStatus.INFO: "blue",
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _parse_status(value: Optional[str]) -> CheckStatus | None:
    if value is None:
        return None
    try:
        return CheckStatus(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(status.value for status in CheckStatus)
        raise typer.BadParameter(f"Unknown status '{value}' (choose from {choices})") from exc


@app.command()
def check(
    manifest: Path = typer.Argument(..., help="XML manifest describing the package.", resolve_path=True),
    directory: Path = typer.Argument(..., help="Directory holding the package files.", resolve_path=True),
    status: Optional[str] = typer.Option(None, "--status", help="Only show results with this status"),
    section: Optional[str] = typer.Option(None, "--section", help="Only show results of this document"),
    search: Optional[str] = typer.Option(None, "--search", help="Only show results containing this text"),
    export: Optional[Path] = typer.Option(None, "--export", help="Write a plain-text report to this file"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Threads for checksum search"),
    threshold: int = typer.Option(
        AppConfig().parallel_threshold,
        "--threshold",
        min=0,
        help="Index size above which checksum search runs in parallel",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Check every file declared in MANIFEST against DIRECTORY."""
    _setup_logging(verbose)
    status_filter = _parse_status(status)

    if not manifest.is_file():
        raise typer.BadParameter(f"Manifest not found: {manifest}")
    if not directory.is_dir():
        raise typer.BadParameter(f"Directory not found: {directory}")

    try:
        documents = load_manifest(manifest)
    except ManifestError as exc:
        raise typer.BadParameter(str(exc)) from exc

    config = AppConfig(parallel_threshold=threshold, max_workers=workers)
    console.print(f"Checking [bold]{manifest.name}[/bold] against [bold]{directory}[/bold]...")

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Checking files", total=None)

        def _on_progress(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        results = reconcile(documents, directory, config, on_progress=_on_progress)

    shown = filter_results(results, status=status_filter, section=section, search=search)
    if not shown:
        console.print("[yellow]No results to display.[/yellow]")
    else:
        table = Table(show_header=True, header_style="bold magenta", show_lines=True)
        table.add_column("Status")
        table.add_column("Section")
        table.add_column("File")
        table.add_column("Signature")
        table.add_column("Message")
        table.add_column("Path")
        for result in shown:
            style = STATUS_STYLES[result.status]
            table.add_row(
                f"[{style}]{result.status.value}[/{style}]",
                result.doc_name,
                result.filename,
                result.signature_filename,
                result.message,
                str(result.file_path) if result.file_path is not None else "",
            )
        console.print(table)

    stats = summarize(shown)
    console.print(
        f"Total: {stats.total}, success: {stats.success}, warnings: {stats.warning}, "
        f"errors: {stats.error}, info: {stats.info}"
    )

    if export is not None:
        written = write_text_report(shown, export, manifest_path=manifest, directory=directory)
        console.print(f"Report written to [bold]{written}[/bold]")

    if any(result.status is CheckStatus.ERROR for result in results):
        raise typer.Exit(code=1)


@app.command()
def checksum(
    files: List[Path] = typer.Argument(..., help="Files to checksum."),
) -> None:
    """Print the CRC-32 of each file."""
    for path in files:
        digest = compute_crc32(path)
        console.print(f"{digest or '-':<8}  {path}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from sigcheck.web.app import app as web_app

    console.print(f"Starting web API on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
