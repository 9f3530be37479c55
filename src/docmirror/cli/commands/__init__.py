"""CLI commands for docmirror."""
