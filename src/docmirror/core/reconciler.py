"""Mirror tree reconciliation.

Keeps the output tree in step with the source tree: mirrors whose document
is gone are deleted, then directories left empty are pruned. Files directly
in the output root (a hand-written README, for instance) are never touched.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from docmirror.core.paths import MirrorPathMapper, mirror_extension
from docmirror.utils.fs import (
    clean_empty_directories,
    discover_files,
    get_relative_path,
    remove_subdirectories,
)
from docmirror.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of a reconciliation pass."""

    removed_files: list[Path] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)


def expected_mirrors(
    sources: Iterable[Path], fmt: str, mapper: MirrorPathMapper
) -> set[Path]:
    """Resolved mirror paths for every source document."""
    return {mapper.mirror_path_for(source, fmt).resolve() for source in sources}


def remove_stale_mirrors(
    sources: Iterable[Path], fmt: str, mapper: MirrorPathMapper
) -> ReconcileResult:
    """Delete mirrors without a source document, then prune empty directories.

    Deletion is best-effort: a file that cannot be removed is logged and
    recorded, and the pass continues.

    Args:
        sources: Current source documents (all under the source root)
        fmt: Mirror format whose files are reconciled
        mapper: Source-to-mirror path mapping

    Returns:
        Files and directories removed, plus per-file errors
    """
    result = ReconcileResult()
    output_root = mapper.output_root.resolve()
    expected = expected_mirrors(sources, fmt, mapper)

    for mirror in discover_files(output_root, mirror_extension(fmt)):
        resolved = mirror.resolve()
        relative = get_relative_path(resolved, output_root)
        if relative is None:
            continue
        if len(relative.parts) < 2:
            continue
        if resolved in expected:
            continue

        try:
            resolved.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            log.warning("Could not remove stale mirror", path=str(resolved), error=str(e))
            result.errors.append((resolved, str(e)))
            continue

        log.info("Stale mirror removed", path=str(resolved))
        result.removed_files.append(resolved)

    result.removed_dirs = clean_empty_directories(output_root)
    for directory in result.removed_dirs:
        log.debug("Empty directory removed", path=str(directory))

    return result


def clean_mirror_output(output_root: Path) -> list[Path]:
    """Delete every subdirectory of the output root, keeping root-level files."""
    removed = remove_subdirectories(output_root)
    if removed:
        log.info("Mirror output cleaned", output_root=str(output_root), directories=len(removed))
    return removed
