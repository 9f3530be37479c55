"""Tests for mirror tree reconciliation."""

from unittest.mock import patch

import pytest

from docmirror.core.paths import MirrorPathMapper
from docmirror.core.reconciler import (
    clean_mirror_output,
    expected_mirrors,
    remove_stale_mirrors,
)


@pytest.fixture
def mapper(source_root, output_root):
    return MirrorPathMapper(source_root=source_root, output_root=output_root)


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x")
    return path


class TestExpectedMirrors:
    """Tests for expected_mirrors function."""

    def test_resolved_paths(self, mapper, source_root, output_root):
        """Test one resolved mirror path per source."""
        sources = [source_root / "a" / "one.docx", source_root / "b" / "two.docx"]

        assert expected_mirrors(sources, "gfm", mapper) == {
            (output_root / "a" / "one.md").resolve(),
            (output_root / "b" / "two.md").resolve(),
        }


class TestRemoveStaleMirrors:
    """Tests for remove_stale_mirrors function."""

    def test_removes_orphan_and_prunes_directory(self, mapper, source_root, output_root):
        """Test a mirror without a document is deleted with its empty directory."""
        keep_source = _touch(source_root / "a" / "keep.docx")
        keep = _touch(output_root / "a" / "keep.md")
        stale = _touch(output_root / "b" / "c" / "gone.md")

        result = remove_stale_mirrors([keep_source], "gfm", mapper)

        assert keep.exists()
        assert not stale.exists()
        assert not (output_root / "b").exists()
        assert result.removed_files == [stale.resolve()]
        assert set(result.removed_dirs) == {
            (output_root / "b" / "c").resolve(),
            (output_root / "b").resolve(),
        }
        assert result.errors == []

    def test_root_level_files_kept(self, mapper, output_root):
        """Test files directly in the output root are never deleted."""
        readme = _touch(output_root / "README.md")

        remove_stale_mirrors([], "gfm", mapper)

        assert readme.exists()
        assert output_root.exists()

    def test_other_format_untouched(self, mapper, output_root):
        """Test only mirrors of the active format are reconciled."""
        html = _touch(output_root / "a" / "page.html")
        md = _touch(output_root / "a" / "page.md")

        remove_stale_mirrors([], "html", mapper)

        assert not html.exists()
        assert md.exists()

    def test_unrelated_files_untouched(self, mapper, output_root):
        """Test non-mirror files keep their directory alive."""
        notes = _touch(output_root / "a" / "notes.txt")

        result = remove_stale_mirrors([], "gfm", mapper)

        assert notes.exists()
        assert result.removed_dirs == []

    def test_empty_directories_pruned_without_mirrors(self, mapper, output_root):
        """Test leftover empty directories are removed, the root is kept."""
        (output_root / "x" / "y").mkdir(parents=True)

        result = remove_stale_mirrors([], "gfm", mapper)

        assert not (output_root / "x").exists()
        assert output_root.exists()
        assert len(result.removed_dirs) == 2

    def test_missing_output_root(self, mapper, output_root):
        """Test a missing output root is a no-op."""
        output_root.rmdir()

        result = remove_stale_mirrors([], "gfm", mapper)

        assert result.removed_files == []
        assert result.removed_dirs == []

    def test_deletion_failure_is_recorded(self, mapper, output_root):
        """Test an undeletable mirror is logged and the pass continues."""
        stale = _touch(output_root / "a" / "one.md")
        other = _touch(output_root / "b" / "two.md")
        real_unlink = type(stale).unlink

        def flaky_unlink(self, *args, **kwargs):
            if self.name == "one.md":
                raise PermissionError("denied")
            return real_unlink(self, *args, **kwargs)

        with patch("pathlib.Path.unlink", flaky_unlink):
            result = remove_stale_mirrors([], "gfm", mapper)

        assert stale.exists()
        assert not other.exists()
        assert result.errors == [(stale.resolve(), "denied")]
        assert result.removed_files == [other.resolve()]

    def test_uppercase_source_extension(self, mapper, source_root, output_root):
        """Test a .DOCX source keeps its mirror."""
        source = _touch(source_root / "a" / "UP.DOCX")
        mirror = _touch(output_root / "a" / "UP.md")

        remove_stale_mirrors([source], "gfm", mapper)

        assert mirror.exists()


class TestCleanMirrorOutput:
    """Tests for clean_mirror_output function."""

    def test_removes_subdirectories_only(self, output_root):
        """Test subdirectories go and root-level files stay."""
        readme = _touch(output_root / "README.md")
        _touch(output_root / "a" / "b" / "c.md")
        (output_root / "empty").mkdir()

        removed = clean_mirror_output(output_root)

        assert readme.exists()
        assert sorted(p.name for p in removed) == ["a", "empty"]
        assert [p.name for p in output_root.iterdir()] == ["README.md"]

    def test_missing_root(self, tmp_path):
        """Test a missing root removes nothing."""
        assert clean_mirror_output(tmp_path / "missing") == []
