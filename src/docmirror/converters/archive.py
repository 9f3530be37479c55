"""Temporary document rebuilding.

A ``.docx`` is a zip archive; its body lives in ``word/document.xml``. The
rebuilder swaps that entry for a copy with field sentinels injected and writes
the result to a uniquely named temporary file for the converter.
"""

import io
import tempfile
import uuid
import zipfile
from pathlib import Path

from lxml import etree

from docmirror.config.constants import DEBUG_XML_SUFFIX, DOCUMENT_XML_ENTRY, TEMP_DOCUMENT_PREFIX
from docmirror.exceptions import MalformedMarkupError, MissingPayloadError
from docmirror.markup.fields import inject_field_code_sentinels
from docmirror.utils.logging import get_logger

log = get_logger(__name__)


def debug_xml_path(source: Path) -> Path:
    """Sibling path where the mutated markup is written for inspection."""
    return source.with_name(source.name + DEBUG_XML_SUFFIX)


def read_document_xml(source: Path) -> bytes:
    """Read the main markup payload of a ``.docx``.

    Raises:
        MissingPayloadError: If the archive has no ``word/document.xml``
        MalformedMarkupError: If the file is not a readable zip archive
    """
    try:
        with zipfile.ZipFile(source) as archive:
            try:
                return archive.read(DOCUMENT_XML_ENTRY)
            except KeyError:
                raise MissingPayloadError(source, DOCUMENT_XML_ENTRY) from None
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise MalformedMarkupError(source, f"Not a valid docx archive: {e}", cause=e) from e


def mutate_document_xml(source: Path, markup: bytes) -> bytes:
    """Inject field sentinels into ``markup`` read from ``source``.

    Raises:
        MalformedMarkupError: If the markup cannot be parsed
    """
    try:
        return inject_field_code_sentinels(markup)
    except etree.XMLSyntaxError as e:
        message = f"Could not parse {DOCUMENT_XML_ENTRY}: {e}"
        raise MalformedMarkupError(source, message, cause=e) from e


def replace_entry(source: Path, entry: str, data: bytes) -> bytes:
    """Return a copy of the archive at ``source`` with ``entry`` replaced.

    All other entries are copied in their original order.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(source) as zin, zipfile.ZipFile(
        buffer, "w", compression=zipfile.ZIP_DEFLATED
    ) as zout:
        for info in zin.infolist():
            if info.filename == entry:
                zout.writestr(entry, data)
            else:
                zout.writestr(info, zin.read(info.filename), compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()


def build_temp_document(
    source: Path,
    debug_xml: bool = False,
    temp_dir: Path | None = None,
) -> Path:
    """Build a temporary ``.docx`` whose field codes are visible text.

    Args:
        source: Source document
        debug_xml: Also write the mutated markup to ``<source>.debug.xml``
        temp_dir: Directory for the temporary file (default: system temp dir)

    Returns:
        Path to the temporary document; the caller removes it

    Raises:
        MissingPayloadError: If the archive has no main markup entry
        MalformedMarkupError: If the archive or its markup cannot be parsed
    """
    markup = read_document_xml(source)
    mutated = mutate_document_xml(source, markup)

    if debug_xml:
        debug_path = debug_xml_path(source)
        try:
            debug_path.write_bytes(mutated)
            log.info("Debug markup written", path=str(debug_path))
        except OSError as e:
            log.warning("Could not write debug markup", path=str(debug_path), error=str(e))

    try:
        payload = replace_entry(source, DOCUMENT_XML_ENTRY, mutated)
    except zipfile.BadZipFile as e:
        raise MalformedMarkupError(source, f"Could not repack docx archive: {e}", cause=e) from e

    directory = temp_dir or Path(tempfile.gettempdir())
    temp_path = directory / f"{TEMP_DOCUMENT_PREFIX}{uuid.uuid4()}.docx"
    try:
        temp_path.write_bytes(payload)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    log.debug("Temporary document built", source=str(source), temp=str(temp_path))
    return temp_path
