"""Logging configuration using structlog."""

import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import structlog
from rich.console import Console

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

BoundLogger = structlog.stdlib.BoundLogger


# =============================================================================
# Request Context
# =============================================================================

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_file_context_var: ContextVar[str | None] = ContextVar("file_context", default=None)


def generate_request_id() -> str:
    """Generate a unique 8-character request ID for tracing."""
    return str(uuid.uuid4())[:8]


@contextmanager
def request_context(
    request_id: str | None = None,
    file_path: str | None = None,
) -> Generator[str, None, None]:
    """Bind a request ID and the document being processed to every log event.

    The previous context is restored on exit, so contexts may nest.

    Example:
        >>> with request_context(file_path="snippets/a.docx"):
        ...     log.info("Building temporary document")  # includes file=snippets/a.docx
    """
    old_request_id = _request_id_var.get()
    old_file = _file_context_var.get()

    new_request_id = request_id or generate_request_id()
    _request_id_var.set(new_request_id)
    if file_path is not None:
        _file_context_var.set(file_path)

    try:
        yield new_request_id
    finally:
        _request_id_var.set(old_request_id)
        _file_context_var.set(old_file)


def _inject_request_context(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Add request_id and file from context unless the event already has them."""
    request_id = _request_id_var.get()
    if request_id and "request_id" not in event_dict:
        event_dict["request_id"] = request_id

    file_ctx = _file_context_var.get()
    if file_ctx and "file" not in event_dict:
        event_dict["file"] = file_ctx

    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================


class SafeStreamHandler(logging.StreamHandler):
    """A StreamHandler that replaces characters the stream cannot encode."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                safe_msg = msg.encode(stream.encoding or "utf-8", errors="replace").decode(
                    stream.encoding or "utf-8", errors="replace"
                )
                stream.write(safe_msg + self.terminator)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


_console: Console | None = None
_log_output: TextIO = sys.stderr

# Converter diagnostics can be long; keep log lines readable
_MAX_VALUE_LENGTH = 500


def get_console() -> Console:
    """Get the global Rich console for coordinated output."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def set_log_output(output: TextIO) -> None:
    """Set the log output stream."""
    global _log_output
    _log_output = output


def _filter_event_dict(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Truncate excessively long values in the event dict."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = value[:_MAX_VALUE_LENGTH] + f"... [{len(value)} chars total]"
        elif isinstance(value, (bytes, bytearray)) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = f"[BINARY DATA: {len(value)} bytes]"
    return event_dict


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Configure structlog for the application.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; rotated daily with 7 days of history
        console_level: Optional override for the console handler level
        file_level: Optional override for the file handler level
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _inject_request_context,
        _filter_event_dict,
    ]

    def _renderer(colors: bool) -> structlog.types.Processor:
        return structlog.dev.ConsoleRenderer(
            colors=colors,
            exception_formatter=structlog.dev.plain_traceback,
            pad_event_to=0,
            pad_level=False,
            sort_keys=False,
        )

    console_handler = SafeStreamHandler(_log_output)
    c_level = getattr(logging, console_level.upper(), log_level) if console_level else log_level
    console_handler.setLevel(c_level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(colors=True),
            ],
        )
    )
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        f_level = getattr(logging, file_level.upper(), log_level) if file_level else log_level
        file_handler.setLevel(f_level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared_processors,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _renderer(colors=False),
                ],
            )
        )
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog bound logger."""
    return structlog.get_logger(name)


def create_task_log_path(log_dir: str | Path, prefix: str = "task") -> tuple[str, Path]:
    """Create a unique log file path for one command run.

    Returns:
        Tuple of (task_id, log_file_path), e.g.
        ``.logs/sync_20260109_143052_a1b2c3d4.log``
    """
    log_dir_path = Path(log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)

    task_id = str(uuid.uuid4())[:8]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir_path / f"{prefix}_{timestamp}_{task_id}.log"

    return task_id, log_file


def setup_task_logging(
    log_dir: str | Path,
    prefix: str = "task",
    verbose: bool = False,
    file_level: str = "DEBUG",
) -> tuple[str, Path]:
    """Set up logging for a command run.

    The console shows WARNING and above unless ``verbose`` is set; the task
    log file captures ``file_level`` and above.

    Returns:
        Tuple of (task_id, log_file_path)
    """
    task_id, log_path = create_task_log_path(log_dir, prefix)

    setup_logging(
        level="DEBUG",
        log_file=str(log_path),
        console_level="DEBUG" if verbose else "WARNING",
        file_level=file_level,
    )

    return task_id, log_path
