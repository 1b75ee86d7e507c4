"""
Pipeline - Runs a complete incremental gallery build.

Stages:
    1. Scan: find images whose output is missing or stale
    2. Transcode: write thumbnails and main renditions (worker pool)
    3. Mirror: copy the theme's static assets
    4. Assemble: render an index page for every album of the output tree
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .album_assembler import AlbumAssembler
from .asset_mirror import AssetMirror, MirrorStats
from .errors import ConfigError
from .gallery_config import GalleryConfig
from .renderer import PageRenderer
from .scan_progress import ScanProgress
from .thumbnail_engine import ThumbnailEngine
from .transcode_progress import TranscodeProgress
from .transcode_stats import TranscodeStats
from .transcoder import Transcoder
from .tree_scanner import TreeScanner


@dataclass
class BuildReport:
    """
    Outcome of one build.

    Attributes:
        tasks_found: Images found stale by the scanner
        up_to_date: Images left alone
        skipped: Scan entries that could not be processed
        transcode: Transcode statistics
        mirror: Asset mirror statistics
        albums: Index pages written
        dry_run: True if nothing was written
        start_time: Start timestamp
        finish_time: Finish timestamp
    """
    tasks_found: int = 0
    up_to_date: int = 0
    skipped: int = 0
    transcode: TranscodeStats = field(default_factory=TranscodeStats)
    mirror: MirrorStats = field(default_factory=MirrorStats)
    albums: List[Path] = field(default_factory=list)
    dry_run: bool = False
    start_time: float = field(default_factory=time.time)
    finish_time: Optional[float] = None

    @property
    def elapsed_seconds(self) -> float:
        end = self.finish_time if self.finish_time is not None else time.time()
        return end - self.start_time

    @property
    def ok(self) -> bool:
        """True if every transcode task succeeded."""
        return self.transcode.ok


class Pipeline:
    """
    Sequences the build stages for one GalleryConfig.

    The configuration is passed in; the pipeline never looks for a
    configuration file itself.
    """

    def __init__(
        self,
        config: GalleryConfig,
        workers: Optional[int] = None,
        quality: int = 85,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Build configuration
            workers: Transcode pool size (default: number of CPUs)
            quality: JPEG quality for re-encoded images
            dry_run: If True, only scan and list what would be built
            logger: Optional logger instance
        """
        self.config = config
        self.workers = workers
        self.quality = quality
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        scan_progress: Optional[ScanProgress] = None,
        transcode_progress: Optional[TranscodeProgress] = None
    ) -> BuildReport:
        """
        Run the build.

        Per-image failures are collected in the report; configuration,
        template and output I/O errors are raised.

        Args:
            scan_progress: Optional scan progress tracker
            transcode_progress: Optional transcode progress tracker

        Returns:
            BuildReport

        Raises:
            ConfigError: If the configuration is unusable
            TemplateError: If an album page cannot be rendered
        """
        errors = self.config.validate()
        if errors:
            for error in errors:
                self.logger.error(error)
            raise ConfigError("Configuration invalid: " + "; ".join(errors))

        report = BuildReport(dry_run=self.dry_run)
        config = self.config

        scanner = TreeScanner(config.input_root, config.output_root, config.extensions, logger=self.logger)
        tasks = scanner.scan(progress=scan_progress)
        report.tasks_found = len(tasks)
        report.up_to_date = scanner.up_to_date
        report.skipped = scanner.skipped

        engine = ThumbnailEngine(
            config.thumbnail_box,
            config.resize_box,
            quality=self.quality,
            logger=self.logger,
        )
        transcoder = Transcoder(engine, workers=self.workers, dry_run=self.dry_run, logger=self.logger)
        report.transcode = transcoder.run(tasks, progress=transcode_progress)

        if self.dry_run:
            report.finish_time = time.time()
            return report

        config.output_root.mkdir(parents=True, exist_ok=True)

        mirror = AssetMirror(config.theme_static_root, config.output_root, logger=self.logger)
        report.mirror = mirror.mirror()

        renderer = PageRenderer(config.theme_templates_root, logger=self.logger)
        assembler = AlbumAssembler(config.output_root, config.extensions, renderer, logger=self.logger)
        report.albums = assembler.assemble()

        report.finish_time = time.time()

        self.logger.info(
            f"Build complete: {report.transcode.processed} images built, "
            f"{report.transcode.errors} failed, {len(report.albums)} albums "
            f"({report.elapsed_seconds:.1f}s)"
        )

        return report
