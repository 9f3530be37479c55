"""Core mirroring module for docmirror."""

from docmirror.core.paths import MirrorPathMapper, mirror_extension
from docmirror.core.pipeline import BatchResult, MirrorFailure, MirrorPipeline, MirrorResult
from docmirror.core.reconciler import ReconcileResult, clean_mirror_output, remove_stale_mirrors

__all__ = [
    "BatchResult",
    "MirrorFailure",
    "MirrorPathMapper",
    "MirrorPipeline",
    "MirrorResult",
    "ReconcileResult",
    "clean_mirror_output",
    "mirror_extension",
    "remove_stale_mirrors",
]
