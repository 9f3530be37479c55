"""Constants for docmirror."""

from docmirror import __version__

# Application constants
APP_NAME = "docmirror"
APP_VERSION = __version__

# Default paths
DEFAULT_SOURCE_ROOT = "snippets"
DEFAULT_OUTPUT_ROOT = "snippets-mirror"
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "docmirror.yaml"

# Source documents
SOURCE_EXTENSION = ".docx"
DOCUMENT_XML_ENTRY = "word/document.xml"
DEBUG_XML_SUFFIX = ".debug.xml"
TEMP_DOCUMENT_PREFIX = "docmirror-"

# Field-code sentinels injected into the markup before conversion
SENTINEL_OPEN = "==::"
SENTINEL_CLOSE = "::=="

# Mirror formats: name -> (pandoc target, mirror extension, token open, token close)
FORMAT_GFM = "gfm"
FORMAT_HTML = "html"
DEFAULT_FORMAT = FORMAT_GFM

MIRROR_FORMATS = {
    FORMAT_GFM: {"target": "gfm", "extension": ".md", "open": "`", "close": "`"},
    FORMAT_HTML: {"target": "html", "extension": ".html", "open": "{{", "close": "}}"},
}

FORMAT_ALIASES = {
    "md": FORMAT_GFM,
    "markdown": FORMAT_GFM,
}

# Pandoc
DEFAULT_PANDOC_PATH = "pandoc"
DEFAULT_PANDOC_WRAP = "auto"
