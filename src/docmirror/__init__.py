"""docmirror - mirror .docx documents into diffable Markdown or HTML."""

__version__ = "0.1.0"
