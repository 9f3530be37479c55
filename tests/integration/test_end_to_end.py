"""End-to-end tests running the real Pandoc binary."""

import pytest

from docmirror.config.settings import MirrorSettings, PathsConfig
from docmirror.converters.pandoc import check_pandoc_available
from docmirror.core.pipeline import MirrorPipeline
from tests.helpers import field_run, paragraph, text_run, write_docx

pytestmark = pytest.mark.skipif(not check_pandoc_available(), reason="pandoc not installed")


def _pipeline(tmp_path, fmt="gfm"):
    settings = MirrorSettings(
        paths=PathsConfig(
            source_root=tmp_path / "snippets", output_root=tmp_path / "snippets-mirror"
        ),
        format=fmt,
    )
    return MirrorPipeline(settings)


class TestEndToEnd:
    """Mirror real documents with Pandoc."""

    def test_lone_field_becomes_code_span(self, tmp_path):
        """Test a document holding one field run mirrors to exactly its code span."""
        write_docx(
            tmp_path / "snippets" / "a" / "foo.docx",
            body=paragraph(field_run("DOCPROPERTY Foo")),
        )
        pipeline = _pipeline(tmp_path)
        pipeline.prepare()

        result = pipeline.generate_all()

        assert result.success
        mirror = tmp_path / "snippets-mirror" / "a" / "foo.md"
        assert mirror.read_text(encoding="utf-8") == "`DOCPROPERTY Foo`\n"

    def test_space_separated_fields_merge_in_html(self, tmp_path):
        """Test two field runs separated by a space become one HTML token."""
        write_docx(
            tmp_path / "snippets" / "a" / "pair.docx",
            body=paragraph(field_run("A"), text_run(" "), field_run("B")),
        )
        pipeline = _pipeline(tmp_path, fmt="html")
        pipeline.prepare()

        result = pipeline.generate_all()

        assert result.success
        text = (tmp_path / "snippets-mirror" / "a" / "pair.html").read_text(encoding="utf-8")
        assert "{{A B}}" in text
        assert "{{A}}" not in text

    def test_field_inside_complex_field(self, tmp_path):
        """Test the instruction shows before the cached result of a complex field."""
        write_docx(
            tmp_path / "snippets" / "a" / "complex.docx",
            body=paragraph(
                text_run("X "),
                '<w:r><w:fldChar w:fldCharType="begin"/></w:r>',
                field_run(" DOCPROPERTY Foo "),
                '<w:r><w:fldChar w:fldCharType="separate"/></w:r>',
                text_run("val"),
                '<w:r><w:fldChar w:fldCharType="end"/></w:r>',
            ),
        )
        pipeline = _pipeline(tmp_path)
        pipeline.prepare()

        pipeline.generate_all()

        text = (tmp_path / "snippets-mirror" / "a" / "complex.md").read_text(encoding="utf-8")
        assert "`DOCPROPERTY Foo`" in text

    def test_adjacent_fields_merge_into_one_code_span(self, tmp_path):
        """Test two neighbouring field runs become one Markdown code span."""
        write_docx(
            tmp_path / "snippets" / "letters" / "welcome.docx",
            body=paragraph(
                text_run("Dear"),
                field_run(" DOCPROPERTY First "),
                text_run(" "),
                field_run(" DOCPROPERTY Last "),
            ),
        )
        pipeline = _pipeline(tmp_path)
        pipeline.prepare()

        result = pipeline.generate_all()

        assert result.success
        text = (tmp_path / "snippets-mirror" / "letters" / "welcome.md").read_text(
            encoding="utf-8"
        )
        assert "`DOCPROPERTY First DOCPROPERTY Last`" in text
        assert "==::" not in text
        assert "::==" not in text

    def test_html_tokens(self, tmp_path):
        """Test HTML mirrors carry double-brace tokens."""
        write_docx(
            tmp_path / "snippets" / "a" / "page.docx",
            body=paragraph(text_run("Page "), field_run("PAGE")),
        )
        pipeline = _pipeline(tmp_path, fmt="html")
        pipeline.prepare()

        pipeline.generate_all()

        text = (tmp_path / "snippets-mirror" / "a" / "page.html").read_text(encoding="utf-8")
        assert "{{PAGE}}" in text
        assert "<p>" in text

    def test_stale_mirror_removed(self, tmp_path):
        """Test a mirror whose document was deleted disappears with its directory."""
        write_docx(tmp_path / "snippets" / "keep" / "a.docx", body=paragraph(text_run("a")))
        stale = tmp_path / "snippets-mirror" / "gone" / "b.md"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")
        readme = tmp_path / "snippets-mirror" / "README.md"
        readme.write_text("keep", encoding="utf-8")
        pipeline = _pipeline(tmp_path)
        pipeline.prepare()

        result = pipeline.generate_all()

        assert result.success
        assert not stale.parent.exists()
        assert readme.exists()
        assert (tmp_path / "snippets-mirror" / "keep" / "a.md").exists()

    def test_broken_document_does_not_stop_batch(self, tmp_path):
        """Test an invalid archive fails alone."""
        write_docx(tmp_path / "snippets" / "a" / "good.docx", body=paragraph(text_run("ok")))
        bad = tmp_path / "snippets" / "a" / "bad.docx"
        bad.write_text("not a zip", encoding="utf-8")
        pipeline = _pipeline(tmp_path)
        pipeline.prepare()

        result = pipeline.generate_all()

        assert [f.document.name for f in result.failures] == ["bad.docx"]
        assert (tmp_path / "snippets-mirror" / "a" / "good.md").exists()
