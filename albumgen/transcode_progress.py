"""
TranscodeProgress - Console feedback while the worker pool runs.
"""

import logging
from typing import Optional

from .conversion_task import ConversionTask, TaskResult
from .transcode_stats import TranscodeStats, format_bytes


class TranscodeProgress:
    """
    Reports finished tasks to the console.

    With show_files every task gets a status line on stdout; otherwise a
    rate and ETA line is logged once per log_interval finished tasks.
    Callbacks arrive on the thread that collects results, never on a worker.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_task_done(self, result: TaskResult) -> None:
        if not self.show_files:
            return
        line = result.format_status()
        if result.success:
            line += f" [{format_bytes(result.bytes_written)}]"
        print(f"  {line}")

    def on_progress_update(self, stats: TranscodeStats) -> None:
        """Log throughput once enough tasks finished since the last line."""
        done = stats.completed_count
        if self.show_files or done - self.last_logged < self.log_interval:
            return

        self.last_logged = done
        self.logger.info(
            f"Transcoded {done}/{stats.total_to_process} "
            f"({stats.errors} failed, {stats.rate_per_minute:.1f}/min, "
            f"~{stats.estimated_remaining_seconds / 60:.0f}m left)"
        )

    def on_dry_run(self, task: ConversionTask) -> None:
        if self.show_files:
            print(f"  [DRY RUN] {task.source_path} -> would build {task.dest_path}")

    __call__ = on_progress_update
