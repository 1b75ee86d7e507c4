"""
ScanProgress - Tracks and displays scan progress.
"""

import logging
import time
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .conversion_task import ConversionTask

ROOT_ALBUM = '.'


class ScanProgress:
    """
    Tracks and displays scan progress with optional per-file output.

    Counts are kept per album directory name.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 500,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's scanned
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.album_counts: Dict[str, int] = {}
        self.stale_count = 0
        self.start_time: Optional[float] = None

    @property
    def total(self) -> int:
        return sum(self.album_counts.values())

    def on_file_scanned(self, task: 'ConversionTask', stale: bool) -> None:
        """
        Called when an image is scanned.

        Args:
            task: Source and mirrored destination of the image
            stale: Whether the destination needs to be rebuilt
        """
        if self.start_time is None:
            self.start_time = time.time()

        album = self._album_of(task)
        self.album_counts[album] = self.album_counts.get(album, 0) + 1
        if stale:
            self.stale_count += 1

        total = self.total

        if self.show_files:
            status = 'STALE' if stale else 'OK'
            print(f"  [{status}] {task.source_path}")
        elif total % self.log_interval == 0:
            elapsed = time.time() - self.start_time
            rate = total / elapsed if elapsed > 0 else 0
            self.logger.info(
                f"  Progress: {total:,} scanned, {self.stale_count:,} stale "
                f"({rate:.0f}/sec)"
            )

    @staticmethod
    def _album_of(task: 'ConversionTask') -> str:
        """Name of the album directory an image sits in."""
        return task.dest_path.parent.name or ROOT_ALBUM

    def __call__(self, task: 'ConversionTask', stale: bool) -> None:
        """Allow use as callback."""
        self.on_file_scanned(task, stale)
