"""
TranscodeStats - Statistics for a transcode run.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import List

from .conversion_task import TaskResult


def format_bytes(size: float) -> str:
    """Human-readable byte count, e.g. 2048 -> '2.0 KB'."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


@dataclass
class TranscodeStats:
    """
    Statistics for a transcode run.

    Updated from worker results through record(), which is safe to call
    from several threads.

    Attributes:
        total_to_process: Total tasks found stale by the scanner
        processed: Tasks whose thumbnail and rendition were written
        errors: Tasks that failed
        resized: Renditions re-encoded to the resize box
        copied: Renditions copied verbatim
        bytes_generated: Total bytes written (thumbnails and renditions)
        start_time: Start timestamp
        error_details: List of error messages
    """
    total_to_process: int = 0
    processed: int = 0
    errors: int = 0
    resized: int = 0
    copied: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, result: TaskResult) -> None:
        """Count one finished task; exactly one counter moves per call."""
        with self._lock:
            if result.success:
                self.processed += 1
                self.bytes_generated += result.bytes_written
                if result.resized:
                    self.resized += 1
                else:
                    self.copied += 1
            else:
                self.errors += 1
                self.error_details.append(f"{result.task.source_path}: {result.error}")

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Processing rate in images per second."""
        if self.elapsed_seconds > 0:
            return self.completed_count / self.elapsed_seconds
        return 0.0

    @property
    def rate_per_minute(self) -> float:
        """Processing rate in images per minute."""
        return self.rate_per_second * 60

    @property
    def estimated_remaining_seconds(self) -> float:
        """Estimated time remaining in seconds."""
        if self.rate_per_second > 0:
            return self.remaining_count / self.rate_per_second
        return 0.0

    @property
    def completed_count(self) -> int:
        """Total completed (processed + errors)."""
        return self.processed + self.errors

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.completed_count

    @property
    def ok(self) -> bool:
        return self.errors == 0
