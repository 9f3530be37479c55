"""Utility module for docmirror."""

from docmirror.utils.fs import (
    atomic_write,
    clean_empty_directories,
    discover_files,
    ensure_directory,
    get_relative_path,
    iter_files,
    remove_file_if_exists,
    remove_subdirectories,
)

__all__ = [
    "atomic_write",
    "clean_empty_directories",
    "discover_files",
    "ensure_directory",
    "get_relative_path",
    "iter_files",
    "remove_file_if_exists",
    "remove_subdirectories",
]
