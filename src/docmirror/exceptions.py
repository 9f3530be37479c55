"""Custom exceptions for docmirror."""

from pathlib import Path


class MirrorError(Exception):
    """Base exception class for docmirror."""

    pass


class ConversionError(MirrorError):
    """Error while mirroring a single document."""

    def __init__(self, file_path: Path, message: str, cause: Exception | None = None) -> None:
        self.file_path = file_path
        self.cause = cause
        self.reason = message
        super().__init__(f"Conversion failed for {file_path}: {message}")


class MissingPayloadError(ConversionError):
    """The document archive has no main markup entry."""

    def __init__(self, file_path: Path, entry: str) -> None:
        super().__init__(file_path, f"Could not find {entry} inside docx")
        self.entry = entry


class MalformedMarkupError(ConversionError):
    """The document archive or its markup payload could not be parsed."""

    pass


class ConverterLaunchError(ConversionError):
    """The external converter process could not be started."""

    def __init__(self, file_path: Path, command: str, cause: Exception | None = None) -> None:
        super().__init__(file_path, f"Could not launch converter '{command}': {cause}", cause=cause)
        self.command = command


class ConverterExitError(ConversionError):
    """The external converter ran but reported failure."""

    def __init__(self, file_path: Path, returncode: int, stderr: str = "") -> None:
        detail = stderr.strip()
        message = f"pandoc failed (exit {returncode})"
        if detail:
            message = f"{message}:\n{detail}"
        super().__init__(file_path, message)
        self.returncode = returncode
        self.stderr = stderr


class ConverterTimeoutError(ConversionError):
    """The external converter did not finish within the configured timeout."""

    def __init__(self, file_path: Path, timeout: float) -> None:
        super().__init__(file_path, f"pandoc timed out after {timeout}s")
        self.timeout = timeout


class InvalidSourcePathError(ConversionError):
    """A requested document is not under the source root."""

    def __init__(self, file_path: Path, source_root: Path) -> None:
        super().__init__(file_path, f"Expected path under '{source_root}'")
        self.source_root = source_root


class ConfigurationError(MirrorError):
    """Configuration error."""

    pass


class SourceRootNotFoundError(MirrorError):
    """The source root directory does not exist."""

    def __init__(self, source_root: Path) -> None:
        self.source_root = source_root
        super().__init__(f"Source root not found: {source_root}")


class OutputRootError(MirrorError):
    """The output root directory could not be created."""

    def __init__(self, output_root: Path, cause: Exception | None = None) -> None:
        self.output_root = output_root
        self.cause = cause
        super().__init__(f"Cannot create output root {output_root}: {cause}")
