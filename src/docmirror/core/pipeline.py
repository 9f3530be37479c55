"""Mirror generation pipeline.

This module provides the MirrorPipeline class that orchestrates mirroring:

1. Build a temporary document with field codes made visible
2. Convert it with Pandoc
3. Turn sentinels into inline tokens
4. Write the mirror file

``generate_all`` runs that flow for every source document and then
reconciles the mirror tree.
"""

from dataclasses import dataclass, field
from pathlib import Path

from docmirror.config.constants import SOURCE_EXTENSION
from docmirror.config.settings import MirrorSettings, normalize_format
from docmirror.converters.archive import build_temp_document
from docmirror.converters.pandoc import PandocConverter
from docmirror.core.paths import MirrorPathMapper
from docmirror.core.reconciler import ReconcileResult, clean_mirror_output, remove_stale_mirrors
from docmirror.exceptions import ConversionError, OutputRootError, SourceRootNotFoundError
from docmirror.markdown.tokens import postprocess
from docmirror.utils.fs import (
    atomic_write,
    discover_files,
    ensure_directory,
    remove_file_if_exists,
)
from docmirror.utils.logging import get_logger, request_context

log = get_logger(__name__)


@dataclass
class MirrorResult:
    """Result of mirroring one document."""

    source: Path
    mirror_path: Path
    format: str


@dataclass
class MirrorFailure:
    """A document that could not be mirrored."""

    document: Path
    error: str


@dataclass
class BatchResult:
    """Result of mirroring the whole source tree."""

    documents: list[Path] = field(default_factory=list)
    mirrors: list[MirrorResult] = field(default_factory=list)
    failures: list[MirrorFailure] = field(default_factory=list)
    reconcile: ReconcileResult = field(default_factory=ReconcileResult)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def processed(self) -> int:
        return len(self.documents)


class MirrorPipeline:
    """Generate mirror files for source documents."""

    def __init__(
        self,
        settings: MirrorSettings,
        converter: PandocConverter | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings (roots, format, debug flag, Pandoc)
            converter: Optional converter instance (for DI/testing)
        """
        self.settings = settings
        self.format = normalize_format(settings.format)
        self.mapper = MirrorPathMapper(
            source_root=settings.paths.source_root,
            output_root=settings.paths.output_root,
        )
        self.converter = converter or PandocConverter(settings.converter)

    def prepare(self, clean: bool = False) -> None:
        """Check the source root and create the output root.

        Args:
            clean: Delete subdirectories of the output root first

        Raises:
            SourceRootNotFoundError: If the source root does not exist
            OutputRootError: If the output root cannot be created
        """
        source_root = self.mapper.source_root
        if not source_root.is_dir():
            raise SourceRootNotFoundError(source_root)

        output_root = self.mapper.output_root
        try:
            ensure_directory(output_root)
        except OSError as e:
            raise OutputRootError(output_root, e) from e

        if clean:
            clean_mirror_output(output_root)

    def discover(self) -> list[Path]:
        """All source documents under the source root, sorted."""
        return discover_files(self.mapper.source_root, SOURCE_EXTENSION)

    def generate(self, source: Path) -> MirrorResult:
        """Generate the mirror for one document.

        The temporary document is removed whether or not conversion succeeds.

        Raises:
            ConversionError: If any step fails for this document
        """
        source = Path(source)
        mirror_path = self.mapper.mirror_path_for(source, self.format)

        with request_context(file_path=str(source)):
            temp_document = build_temp_document(source, debug_xml=self.settings.debug_xml)
            try:
                raw = self.converter.convert(temp_document, self.format)
                text = postprocess(raw, self.format)
                with atomic_write(mirror_path) as f:
                    f.write(text)
            finally:
                remove_file_if_exists(temp_document)

            log.info("Mirror written", source=str(source), mirror=str(mirror_path))

        return MirrorResult(source=source, mirror_path=mirror_path, format=self.format)

    def generate_all(self) -> BatchResult:
        """Mirror every source document, then reconcile the mirror tree.

        Failures are collected per document and never stop the batch; the
        reconciliation pass always runs.
        """
        result = BatchResult(documents=self.discover())
        log.info("Mirroring documents", count=len(result.documents), format=self.format)

        for document in result.documents:
            try:
                result.mirrors.append(self.generate(document))
            except Exception as e:
                log.error("Mirror failed", source=str(document), error=str(e))
                result.failures.append(MirrorFailure(document=document, error=_describe(e)))

        result.reconcile = remove_stale_mirrors(result.documents, self.format, self.mapper)
        return result


def _describe(error: Exception) -> str:
    if isinstance(error, ConversionError):
        return error.reason
    return str(error)
