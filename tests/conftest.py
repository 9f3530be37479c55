"""Pytest configuration and fixtures."""

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from docmirror.config.settings import MirrorSettings, PathsConfig, get_settings
from docmirror.utils.logging import set_log_output
from tests.helpers import write_docx


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep developer DOCMIRROR_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("DOCMIRROR_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_logging():
    """Restore the root logger and log output after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    set_log_output(sys.stderr)


@pytest.fixture
def docx_factory(tmp_path: Path) -> Callable[..., Path]:
    """Create .docx files relative to ``tmp_path``."""

    def factory(relative: str, body: str | None = None, document: bytes | None = None) -> Path:
        return write_docx(tmp_path / relative, body=body, document=document)

    return factory


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Source document tree."""
    root = tmp_path / "snippets"
    root.mkdir()
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Mirror tree."""
    root = tmp_path / "snippets-mirror"
    root.mkdir()
    return root


@pytest.fixture
def settings(source_root: Path, output_root: Path) -> MirrorSettings:
    """Settings pointing at the temporary source and mirror trees."""
    return MirrorSettings(
        paths=PathsConfig(source_root=source_root, output_root=output_root),
        format="gfm",
    )
