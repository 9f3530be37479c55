"""Builders for minimal .docx archives used across the test suite."""

import zipfile
from pathlib import Path

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

ROOT_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""


def document_xml(body: str) -> bytes:
    """Wrap WordprocessingML body content in a complete document.xml."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}"><w:body>{body}</w:body></w:document>'
    ).encode("utf-8")


def field_run(instruction: str) -> str:
    """A run holding only a field instruction."""
    return f'<w:r><w:instrText xml:space="preserve">{instruction}</w:instrText></w:r>'


def text_run(text: str) -> str:
    """A run holding visible text."""
    return f'<w:r><w:t xml:space="preserve">{text}</w:t></w:r>'


def paragraph(*runs: str) -> str:
    """A paragraph holding ``runs``."""
    return f"<w:p>{''.join(runs)}</w:p>"


def write_docx(path: Path, body: str | None = None, document: bytes | None = None) -> Path:
    """Write a minimal .docx archive to ``path``.

    ``document`` replaces the generated document.xml verbatim; pass ``b""``
    to leave the entry out.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = document if document is not None else document_xml(body or "")
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        archive.writestr("_rels/.rels", ROOT_RELS)
        if payload:
            archive.writestr("word/document.xml", payload)
        archive.writestr("word/styles.xml", f'<w:styles xmlns:w="{W_NS}"/>')
    return path
