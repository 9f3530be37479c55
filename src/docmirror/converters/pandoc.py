"""Pandoc invocation boundary."""

import shutil
import subprocess
from pathlib import Path

from docmirror.config.constants import MIRROR_FORMATS
from docmirror.config.settings import ConverterConfig, normalize_format
from docmirror.exceptions import ConverterExitError, ConverterLaunchError, ConverterTimeoutError
from docmirror.utils.logging import get_logger

log = get_logger(__name__)


class PandocConverter:
    """Convert a ``.docx`` to GitHub-flavoured Markdown or HTML with Pandoc.

    Pandoc runs as a blocking child process; its stdout is the converted text
    and its stderr is kept for diagnostics. There is no retry.
    """

    name = "pandoc"
    source_format = "docx"

    def __init__(self, config: ConverterConfig | None = None) -> None:
        """Initialize the Pandoc converter.

        Args:
            config: Pandoc invocation settings (default: ConverterConfig())
        """
        self.config = config or ConverterConfig()

    def build_command(self, document: Path, fmt: str) -> list[str]:
        """Build the Pandoc command line for ``document``."""
        target = MIRROR_FORMATS[normalize_format(fmt)]["target"]
        cmd = [
            self.config.pandoc_path,
            "-f",
            self.source_format,
            "-t",
            target,
            f"--wrap={self.config.wrap}",
        ]
        cmd.extend(self.config.extra_args)
        cmd.append(str(document))
        return cmd

    def convert(self, document: Path, fmt: str) -> str:
        """Convert ``document`` and return Pandoc's standard output.

        Args:
            document: Path to the (temporary) input document
            fmt: Mirror format, ``gfm`` or ``html``

        Returns:
            Converted text

        Raises:
            ConverterLaunchError: If Pandoc could not be started
            ConverterExitError: If Pandoc exited with a nonzero status
            ConverterTimeoutError: If the configured timeout expired
        """
        cmd = self.build_command(document, fmt)
        log.debug("Running Pandoc", command=" ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.config.timeout,
            )
        except subprocess.TimeoutExpired as e:
            log.error("Pandoc timed out", document=str(document), timeout=self.config.timeout)
            raise ConverterTimeoutError(document, self.config.timeout or 0) from e
        except OSError as e:
            log.error("Pandoc could not be started", command=cmd[0], error=str(e))
            raise ConverterLaunchError(document, cmd[0], cause=e) from e

        if result.returncode != 0:
            log.error(
                "Pandoc conversion failed",
                document=str(document),
                returncode=result.returncode,
                error=result.stderr,
            )
            raise ConverterExitError(document, result.returncode, result.stderr or "")

        if result.stderr:
            log.debug("Pandoc diagnostics", stderr=result.stderr)

        return result.stdout or ""


def check_pandoc_available(pandoc_path: str = "pandoc") -> bool:
    """Check if Pandoc is installed and available."""
    return shutil.which(pandoc_path) is not None


def get_pandoc_version(pandoc_path: str = "pandoc") -> str | None:
    """Get Pandoc version or None if not installed."""
    resolved = shutil.which(pandoc_path)
    if not resolved:
        return None

    try:
        result = subprocess.run(
            [resolved, "--version"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError:
        return None
    # First line is "pandoc X.Y.Z"
    first_line = result.stdout.split("\n")[0]
    return first_line.replace("pandoc ", "").strip() or None
