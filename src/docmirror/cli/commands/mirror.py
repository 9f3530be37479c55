"""Mirror command for a single document."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from docmirror.cli.callbacks import validate_format
from docmirror.cli.options import MirrorOptions, warn_if_pandoc_missing
from docmirror.core.pipeline import MirrorPipeline
from docmirror.exceptions import ConfigurationError, ConversionError
from docmirror.utils.logging import get_console, get_logger, setup_task_logging

console = Console()
err_console = get_console()
log = get_logger(__name__)


def mirror(
    document: Annotated[
        Path,
        typer.Argument(
            help="Source .docx under the source root.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Mirror format: gfm (Markdown) or html.",
            callback=validate_format,
        ),
    ] = None,
    debug_xml: Annotated[
        bool,
        typer.Option(
            "--debug-xml",
            help="Write the mutated document.xml next to the source for inspection.",
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
    """Generate the mirror for a single document.

    Examples:
        docmirror mirror snippets/foo/bar.docx
        docmirror mirror snippets/foo/bar.docx --format html
        docmirror mirror snippets/foo/bar.docx --debug-xml
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
        settings.log_dir, prefix="mirror", verbose=verbose, file_level=settings.log_level
    )
    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))
    log.info("Task started", task_id=task_id, document=str(document), format=settings.format)
    warn_if_pandoc_missing(settings.converter.pandoc_path)

    pipeline = MirrorPipeline(settings)
    try:
        result = pipeline.generate(document)
    except ConversionError as e:
        log.error("Task failed", error=str(e))
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1) from e

    console.print(f"Wrote mirror: {escape(str(result.mirror_path))}", soft_wrap=True)
