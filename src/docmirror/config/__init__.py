"""Configuration module for docmirror."""

from docmirror.config.settings import (
    ConverterConfig,
    MirrorSettings,
    PathsConfig,
    get_settings,
    normalize_format,
    reload_settings,
)

__all__ = [
    "ConverterConfig",
    "MirrorSettings",
    "PathsConfig",
    "get_settings",
    "normalize_format",
    "reload_settings",
]
