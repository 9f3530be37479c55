"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from docmirror.config.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_FORMAT,
    DEFAULT_LOG_DIR,
    DEFAULT_OUTPUT_ROOT,
    DEFAULT_PANDOC_PATH,
    DEFAULT_PANDOC_WRAP,
    DEFAULT_SOURCE_ROOT,
    FORMAT_ALIASES,
    MIRROR_FORMATS,
)
from docmirror.exceptions import ConfigurationError


def normalize_format(value: str | None) -> str:
    """Normalize a user-supplied mirror format.

    ``md`` and ``markdown`` are aliases for ``gfm``; an empty value means the
    default format.

    Raises:
        ConfigurationError: If the format is not known
    """
    name = (value or "").strip().lower() or DEFAULT_FORMAT
    name = FORMAT_ALIASES.get(name, name)
    if name not in MIRROR_FORMATS:
        raise ConfigurationError(
            f"Unknown mirror format '{value}'. Options: {', '.join(MIRROR_FORMATS)}"
        )
    return name


class PathsConfig(BaseModel):
    """Source and output tree locations."""

    source_root: Path = Path(DEFAULT_SOURCE_ROOT)
    output_root: Path = Path(DEFAULT_OUTPUT_ROOT)


class ConverterConfig(BaseModel):
    """Pandoc invocation settings, passed explicitly to the converter."""

    pandoc_path: str = DEFAULT_PANDOC_PATH
    wrap: Literal["auto", "none", "preserve"] = DEFAULT_PANDOC_WRAP
    timeout: float | None = Field(default=None, gt=0)  # None blocks until pandoc exits
    extra_args: list[str] = Field(default_factory=list)


class MirrorSettings(BaseSettings):
    """Main configuration class for docmirror."""

    model_config = SettingsConfigDict(
        env_prefix="DOCMIRROR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    paths: PathsConfig = Field(default_factory=PathsConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)

    # Mirror generation
    format: str = DEFAULT_FORMAT
    debug_xml: bool = False

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    @field_validator("format", mode="before")
    @classmethod
    def _validate_format(cls, value: str | None) -> str:
        try:
            return normalize_format(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e


@lru_cache
def get_settings() -> MirrorSettings:
    """Get cached settings instance."""
    return MirrorSettings()


def reload_settings() -> MirrorSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
