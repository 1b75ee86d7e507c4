"""
Reporter - Prints human-readable build summaries.
"""

import logging
import sys
from typing import Optional, TextIO

from .pipeline import BuildReport
from .transcode_stats import format_bytes


class Reporter:
    """
    Prints human-readable summaries of a BuildReport.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_build(self, report: BuildReport, max_errors: int = 20) -> None:
        """
        Print a summary of a finished build.

        Args:
            report: The build to summarize
            max_errors: Maximum number of failures listed individually
        """
        transcode = report.transcode
        mirror = report.mirror

        self._print("=" * 60)
        self._print("BUILD SUMMARY" + (" (DRY RUN)" if report.dry_run else ""))
        self._print("=" * 60)
        self._print()

        self._print("Images:")
        self._print(f"  Stale:                {report.tasks_found:>10,}")
        self._print(f"  Up to date:           {report.up_to_date:>10,}")
        if report.skipped:
            self._print(f"  Skipped:              {report.skipped:>10,}")
        if not report.dry_run:
            self._print(f"  Built:                {transcode.processed:>10,}"
                        f"  ({transcode.resized:,} resized, {transcode.copied:,} copied)")
            self._print(f"  Failed:               {transcode.errors:>10,}")
            self._print(f"  Written:              {format_bytes(transcode.bytes_generated):>10}")
            self._print()

            self._print("Theme assets:")
            self._print(f"  Copied:               {mirror.files_copied:>10,}")
            self._print(f"  Up to date:           {mirror.up_to_date:>10,}")
            self._print()

            self._print(f"Albums:                 {len(report.albums):>10,}")
        self._print(f"Time:                   {self._format_duration(report.elapsed_seconds):>10}")
        self._print()

        if transcode.error_details:
            self._print("-" * 60)
            self._print(f"FAILURES ({len(transcode.error_details)})")
            self._print("-" * 60)
            for detail in transcode.error_details[:max_errors]:
                self._print(f"  {detail}")
            hidden = len(transcode.error_details) - max_errors
            if hidden > 0:
                self._print(f"  ... and {hidden} more")
            self._print()
