"""Shared options for the mirror and sync commands."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from docmirror.config.settings import MirrorSettings, get_settings
from docmirror.converters.pandoc import check_pandoc_available
from docmirror.exceptions import ConfigurationError
from docmirror.utils.logging import get_console, get_logger

log = get_logger(__name__)


@dataclass
class MirrorOptions:
    """CLI overrides applied on top of the loaded settings."""

    format: str | None = None
    debug_xml: bool = False
    source_root: Path | None = None
    output_root: Path | None = None

    def apply(self, settings: MirrorSettings) -> MirrorSettings:
        """Return a copy of ``settings`` with the CLI overrides applied."""
        paths = settings.paths.model_copy(
            update={
                key: value
                for key, value in (
                    ("source_root", self.source_root),
                    ("output_root", self.output_root),
                )
                if value is not None
            }
        )
        update: dict = {"paths": paths}
        if self.format is not None:
            update["format"] = self.format
        if self.debug_xml:
            update["debug_xml"] = True
        return settings.model_copy(update=update)

    def load(self) -> MirrorSettings:
        """Load settings from the config file and environment, then apply overrides.

        Raises:
            ConfigurationError: If the configuration file or environment is invalid
        """
        try:
            settings = get_settings()
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e
        return self.apply(settings)


def warn_if_pandoc_missing(pandoc_path: str) -> bool:
    """Warn when the configured Pandoc binary cannot be found.

    Returns:
        True if Pandoc is available
    """
    if check_pandoc_available(pandoc_path):
        return True
    log.warning("Pandoc not found, conversions will fail", pandoc_path=pandoc_path)
    get_console().print(
        f"[yellow]Warning:[/yellow] Pandoc not found: {escape(pandoc_path)}", soft_wrap=True
    )
    return False
