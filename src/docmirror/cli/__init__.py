"""Command-line interface for docmirror."""
