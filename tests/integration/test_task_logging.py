from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from docmirror.cli.main import app
from tests.helpers import paragraph, write_docx

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("restore_logging")


class _Converter:
    def __init__(self, config=None):
        self.config = config

    def convert(self, document, fmt):
        return "text\n"


def test_task_logging_creation(tmp_path, monkeypatch):
    # Logs are created relative to the working directory
    monkeypatch.chdir(tmp_path)
    write_docx(tmp_path / "snippets" / "a" / "one.docx", body=paragraph())

    with patch("docmirror.core.pipeline.PandocConverter", _Converter):
        result = runner.invoke(app, ["sync"])
    assert result.exit_code == 0

    log_dir = Path(".logs")
    assert log_dir.exists()

    log_files = list(log_dir.glob("sync_*.log"))
    assert len(log_files) == 1

    content = log_files[0].read_text(encoding="utf-8")
    assert "Task started" in content
    assert "Mirror written" in content
    # Per-document events carry the document path
    assert "one.docx" in content

    with patch("docmirror.core.pipeline.PandocConverter", _Converter):
        result = runner.invoke(app, ["mirror", "snippets/a/one.docx", "--verbose"])
    assert result.exit_code == 0

    mirror_logs = list(log_dir.glob("mirror_*.log"))
    assert len(mirror_logs) == 1
    assert "Mirror written" in mirror_logs[0].read_text(encoding="utf-8")
