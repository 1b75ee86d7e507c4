"""
Transcoder - Runs the ThumbnailEngine over a work list in a worker pool.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from .conversion_task import ConversionTask, TaskResult
from .thumbnail_engine import ThumbnailEngine
from .transcode_progress import TranscodeProgress
from .transcode_stats import TranscodeStats


def default_workers() -> int:
    """One worker per available CPU."""
    return os.cpu_count() or 1


class Transcoder:
    """
    Transcodes ConversionTasks concurrently.

    Tasks run on a bounded thread pool; Pillow releases the GIL while it
    decodes, resamples and encodes, so the work runs in parallel. Results are
    collected on the calling thread, which is also where progress is reported.
    A failing task never prevents the others from running.
    """

    def __init__(
        self,
        engine: ThumbnailEngine,
        workers: Optional[int] = None,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize transcoder.

        Args:
            engine: Engine that processes a single task
            workers: Pool size (default: number of CPUs)
            dry_run: If True, report stale tasks without writing anything
            logger: Optional logger instance
        """
        self.engine = engine
        self.workers = workers or default_workers()
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)
        self.stats = TranscodeStats()
        self.results: List[TaskResult] = []

    def run(
        self,
        tasks: Sequence[ConversionTask],
        progress: Optional[TranscodeProgress] = None
    ) -> TranscodeStats:
        """
        Process every task and wait for all of them to finish.

        Args:
            tasks: Work list from the scanner
            progress: Optional progress tracker

        Returns:
            TranscodeStats with results; failures are listed in error_details
        """
        self.stats = TranscodeStats(total_to_process=len(tasks))
        self.results = []

        if not tasks:
            self.logger.info("Nothing to transcode")
            return self.stats

        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(
            f"Starting transcode: {len(tasks)} images on {self.workers} workers ({self.engine!r}){mode_str}"
        )

        if self.dry_run:
            for task in tasks:
                if progress:
                    progress.on_dry_run(task)
                else:
                    self.logger.info(f"[DRY RUN] Would build: {task.dest_path}")
            return self.stats

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix='transcode') as pool:
            futures = {pool.submit(self.engine.process, task): task for task in tasks}
            for future in as_completed(futures):
                result = self._collect(future, futures[future])
                self.results.append(result)
                self.stats.record(result)

                if progress:
                    progress.on_task_done(result)
                    progress.on_progress_update(self.stats)

        self.logger.info(
            f"Transcode complete: {self.stats.processed} built "
            f"({self.stats.resized} resized, {self.stats.copied} copied), "
            f"{self.stats.errors} errors ({self.stats.elapsed_seconds:.1f}s)"
        )

        return self.stats

    @property
    def failures(self) -> List[TaskResult]:
        return [result for result in self.results if not result.success]

    def _collect(self, future, task: ConversionTask) -> TaskResult:
        """Result of a finished future, turning unexpected worker exceptions into failures."""
        try:
            return future.result()
        except Exception as e:
            self.logger.exception(f"Unexpected error processing {task.source_path}: {e}")
            return TaskResult.failed(task, str(e))
