"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from docmirror.cli.commands.mirror import mirror
from docmirror.cli.commands.sync import sync
from docmirror.config.constants import APP_NAME, APP_VERSION
from docmirror.converters.pandoc import get_pandoc_version

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name=APP_NAME,
    help="Mirror .docx documents into diffable Markdown or HTML.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="mirror", help="Generate the mirror for a single document.")(mirror)
app.command(name="sync", help="Mirror all documents and remove stale mirrors.")(sync)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]{APP_NAME}[/bold blue] version [green]{APP_VERSION}[/green]")
        pandoc_version = get_pandoc_version()
        console.print(f"pandoc {pandoc_version}" if pandoc_version else "pandoc not found")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """docmirror - keep a diffable text mirror of your .docx documents."""
    pass


if __name__ == "__main__":
    app()
