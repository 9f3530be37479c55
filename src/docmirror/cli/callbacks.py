"""CLI callback functions."""

import typer

from docmirror.config.settings import normalize_format
from docmirror.exceptions import ConfigurationError


def validate_format(value: str | None) -> str | None:
    """Validate and normalize the --format option."""
    if value is None:
        return None

    try:
        return normalize_format(value)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e)) from e
