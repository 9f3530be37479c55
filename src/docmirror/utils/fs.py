"""File system utilities for docmirror.

Provides file discovery, atomic writes and directory pruning for the mirror
tree.
"""

import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from docmirror.utils.logging import get_logger

log = get_logger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def iter_files(directory: Path, extension: str) -> Iterator[Path]:
    """Recursively iterate over files whose suffix matches ``extension``.

    The comparison is case-insensitive. A missing directory yields nothing.

    Args:
        directory: Directory to search
        extension: File extension including the dot (e.g. '.docx')

    Yields:
        File paths
    """
    if not directory.is_dir():
        return

    wanted = extension.lower()
    for root, _dirs, files in os.walk(directory):
        root_path = Path(root)
        for filename in files:
            if filename.lower().endswith(wanted):
                yield root_path / filename


def discover_files(directory: Path, extension: str) -> list[Path]:
    """Discover files under a directory, sorted for consistent ordering.

    Args:
        directory: Directory to search recursively
        extension: File extension including the dot

    Returns:
        Sorted list of file paths
    """
    return sorted(iter_files(directory, extension))


def get_relative_path(file_path: Path, base_path: Path) -> Path | None:
    """Get the path of ``file_path`` relative to ``base_path``.

    Returns:
        Relative path, or None when file_path is not inside base_path
    """
    try:
        return file_path.relative_to(base_path)
    except ValueError:
        return None


@contextmanager
def atomic_write(
    file_path: Path,
    mode: str = "w",
    encoding: str | None = "utf-8",
) -> Iterator[IO[Any]]:
    """Context manager for atomic file writes.

    Writes to a temp file in the target directory, then renames it over the
    target.

    Args:
        file_path: Target file path
        mode: File mode ('w' or 'wb')
        encoding: File encoding (ignored for binary mode)

    Yields:
        File handle
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_name = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
    )
    temp_path = Path(temp_name)

    try:
        os.close(temp_fd)

        if "b" in mode:
            with open(temp_path, mode) as f:
                yield f
        else:
            with open(temp_path, mode, encoding=encoding, newline="") as f:
                yield f

        temp_path.replace(file_path)

    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


def remove_file_if_exists(file_path: Path) -> bool:
    """Remove a file, logging instead of raising when removal fails.

    Returns:
        True if the file was removed
    """
    try:
        file_path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        log.warning("Could not remove file", path=str(file_path), error=str(e))
        return False


def clean_empty_directories(directory: Path) -> list[Path]:
    """Remove empty directories below ``directory``, never ``directory`` itself.

    The walk is bottom-up, so a parent emptied by removing its children is
    removed in the same pass.

    Args:
        directory: Root of the tree to prune

    Returns:
        Directories removed, deepest first
    """
    removed: list[Path] = []
    if not directory.is_dir():
        return removed

    for root, _dirs, _files in os.walk(directory, topdown=False):
        root_path = Path(root)
        if root_path == directory:
            continue
        try:
            if not any(root_path.iterdir()):
                root_path.rmdir()
                removed.append(root_path)
        except OSError as e:
            log.warning("Could not remove directory", path=str(root_path), error=str(e))

    return removed


def remove_subdirectories(directory: Path) -> list[Path]:
    """Delete every subdirectory of ``directory``, keeping files at its top level.

    Returns:
        Subdirectories removed
    """
    removed: list[Path] = []
    if not directory.is_dir():
        return removed

    for entry in sorted(directory.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
            removed.append(entry)

    return removed
