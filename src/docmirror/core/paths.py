"""Mapping between source documents and mirror files."""

from dataclasses import dataclass
from pathlib import Path

from docmirror.config.constants import MIRROR_FORMATS, SOURCE_EXTENSION
from docmirror.config.settings import normalize_format
from docmirror.exceptions import InvalidSourcePathError
from docmirror.utils.fs import get_relative_path


def mirror_extension(fmt: str) -> str:
    """File extension of mirrors in ``fmt`` (``.md`` or ``.html``)."""
    return MIRROR_FORMATS[normalize_format(fmt)]["extension"]


def _replace_suffix(relative: Path, old: str, new: str) -> Path:
    name = relative.name
    if name.lower().endswith(old.lower()):
        name = name[: -len(old)]
    return relative.with_name(name + new)


@dataclass(frozen=True)
class MirrorPathMapper:
    """Map documents under ``source_root`` to mirrors under ``output_root``.

    The relative structure is kept; only the root and the extension change.
    """

    source_root: Path
    output_root: Path

    def relative_source(self, source: Path) -> Path:
        """Path of ``source`` relative to the source root.

        Raises:
            InvalidSourcePathError: If source is not a document under the root
        """
        relative = get_relative_path(Path(source).absolute(), self.source_root.absolute())
        if relative is None or relative == Path(".") or ".." in relative.parts:
            raise InvalidSourcePathError(Path(source), self.source_root)
        if not relative.name.lower().endswith(SOURCE_EXTENSION):
            raise InvalidSourcePathError(Path(source), self.source_root)
        return relative

    def mirror_path_for(self, source: Path, fmt: str) -> Path:
        """Mirror file for ``source`` in ``fmt``."""
        relative = self.relative_source(source)
        return self.output_root / _replace_suffix(relative, SOURCE_EXTENSION, mirror_extension(fmt))

    def source_path_for(self, mirror: Path, fmt: str) -> Path:
        """Source document that ``mirror`` was generated from.

        Raises:
            ValueError: If mirror is not a ``fmt`` mirror under the output root
        """
        extension = mirror_extension(fmt)
        relative = get_relative_path(Path(mirror).absolute(), self.output_root.absolute())
        if relative is None or not relative.name.lower().endswith(extension):
            raise ValueError(f"Not a {extension} mirror under {self.output_root}: {mirror}")
        return self.source_root / _replace_suffix(relative, extension, SOURCE_EXTENSION)
