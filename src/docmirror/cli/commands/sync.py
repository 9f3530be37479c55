"""Sync command: mirror every document and reconcile the mirror tree."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from docmirror.cli.callbacks import validate_format
from docmirror.cli.options import MirrorOptions, warn_if_pandoc_missing
from docmirror.core.pipeline import BatchResult, MirrorPipeline
from docmirror.exceptions import ConfigurationError, OutputRootError, SourceRootNotFoundError
from docmirror.utils.logging import get_console, get_logger, setup_task_logging

console = Console()
err_console = get_console()
log = get_logger(__name__)


def sync(
    format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Mirror format: gfm (Markdown) or html.",
            callback=validate_format,
        ),
    ] = None,
    clean: Annotated[
        bool,
        typer.Option(
            "--clean",
            help="Delete all subdirectories of the output root before generating.",
        ),
    ] = False,
    debug_xml: Annotated[
        bool,
        typer.Option(
            "--debug-xml",
            help="Write each mutated document.xml next to its source for inspection.",
        ),
    ] = False,
    source_root: Annotated[
        Path | None,
        typer.Option("--source-root", help="Root of the source document tree."),
    ] = None,
    output_root: Annotated[
        Path | None,
        typer.Option("--output-root", help="Root of the mirror tree."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
) -> None:
    """Mirror every document under the source root.

    Mirrors whose source document no longer exists are deleted, along with
    directories left empty. Files directly in the output root are kept.

    Examples:
        docmirror sync
        docmirror sync --format html
        docmirror sync --clean
    """
    options = MirrorOptions(
        format=format,
        debug_xml=debug_xml,
        source_root=source_root,
        output_root=output_root,
    )
    try:
        settings = options.load()
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(2) from e

    task_id, log_path = setup_task_logging(
        settings.log_dir, prefix="sync", verbose=verbose, file_level=settings.log_level
    )
    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))
    log.info(
        "Task started",
        task_id=task_id,
        source_root=str(settings.paths.source_root),
        output_root=str(settings.paths.output_root),
        format=settings.format,
        clean=clean,
    )
    warn_if_pandoc_missing(settings.converter.pandoc_path)

    pipeline = MirrorPipeline(settings)
    try:
        pipeline.prepare(clean=clean)
    except (SourceRootNotFoundError, OutputRootError) as e:
        log.error("Task aborted", error=str(e))
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(2) from e

    result = pipeline.generate_all()
    _display_summary(result)

    if not result.success:
        raise typer.Exit(1)


def _display_summary(result: BatchResult) -> None:
    """Print the processed count and any per-document failures."""
    console.print(f"Processed {result.processed} .docx file(s).")

    removed = len(result.reconcile.removed_files)
    if removed:
        console.print(f"Removed {removed} stale mirror(s).")

    if result.failures:
        err_console.print(f"[bold red]Failures ({len(result.failures)}):[/bold red]")
        for failure in result.failures:
            err_console.print(
                f"- {escape(str(failure.document))}: {escape(failure.error)}", soft_wrap=True
            )
