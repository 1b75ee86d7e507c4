"""
ConversionTask - A source image paired with its mirrored destination.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

THUMBNAILS_DIR = 'thumbnails'
STATIC_DIR = 'static'

# Output directory names that never come from the input tree
RESERVED_DIRS = frozenset({THUMBNAILS_DIR, STATIC_DIR})


@dataclass(frozen=True)
class ConversionTask:
    """
    One unit of work for the transcode stage.

    Attributes:
        source_path: Image under the input root
        dest_path: Mirrored location of the main rendition under the output root
    """
    source_path: Path
    dest_path: Path

    @property
    def filename(self) -> str:
        return self.dest_path.name

    @property
    def thumbnail_dir(self) -> Path:
        return self.dest_path.parent / THUMBNAILS_DIR

    @property
    def thumbnail_path(self) -> Path:
        """Thumbnail of D/X is always stored at D/thumbnails/X."""
        return self.thumbnail_dir / self.filename

    @property
    def extension(self) -> str:
        """File extension without the leading dot."""
        return self.source_path.suffix[1:]


@dataclass
class TaskResult:
    """
    Tagged outcome of processing a single ConversionTask.

    Attributes:
        task: The task that was processed
        success: Whether both the thumbnail and the rendition were written
        error: Error message (if failed)
        thumbnail_bytes: Size of the written thumbnail
        rendition_bytes: Size of the written main rendition
        resized: True if the rendition was re-encoded, False if copied verbatim
    """
    task: ConversionTask
    success: bool
    error: Optional[str] = None
    thumbnail_bytes: int = 0
    rendition_bytes: int = 0
    resized: bool = False

    @classmethod
    def failed(cls, task: ConversionTask, error: str) -> 'TaskResult':
        return cls(task=task, success=False, error=error)

    @property
    def bytes_written(self) -> int:
        return self.thumbnail_bytes + self.rendition_bytes

    def format_status(self) -> str:
        """Format a one-line status for per-file output."""
        if not self.success:
            return f"[ERROR] {self.task.source_path} -> {self.error or 'failed'}"
        mode = 'resized' if self.resized else 'copied'
        return f"[OK] {self.task.source_path} -> {self.task.dest_path} ({mode})"
