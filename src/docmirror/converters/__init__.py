"""Document rebuilding and conversion for docmirror."""

from docmirror.converters.archive import (
    build_temp_document,
    debug_xml_path,
    read_document_xml,
    replace_entry,
)
from docmirror.converters.pandoc import (
    PandocConverter,
    check_pandoc_available,
    get_pandoc_version,
)

__all__ = [
    "PandocConverter",
    "build_temp_document",
    "check_pandoc_available",
    "debug_xml_path",
    "get_pandoc_version",
    "read_document_xml",
    "replace_entry",
]
