"""
Static photo gallery generator.

Incremental build pipeline:
    1. Scan the input tree for images whose output is missing or stale
    2. Transcode thumbnails and main renditions in a worker pool
    3. Mirror the theme's static assets
    4. Render an index page for every album of the output tree
"""

__version__ = "0.3.0"

from .errors import AlbumgenError, ConfigError, PathError, CodecError, TemplateError
from .gallery_config import GalleryConfig
from .conversion_task import ConversionTask, TaskResult
from .scan_progress import ScanProgress
from .tree_scanner import TreeScanner
from .thumbnail_engine import ThumbnailEngine
from .transcode_stats import TranscodeStats
from .transcode_progress import TranscodeProgress
from .transcoder import Transcoder
from .asset_mirror import AssetMirror, MirrorStats
from .album import AlbumNode, ImageEntry, RenderContext
from .renderer import PageRenderer
from .album_assembler import AlbumAssembler
from .pipeline import BuildReport, Pipeline
from .reporter import Reporter

__all__ = [
    "AlbumgenError",
    "ConfigError",
    "PathError",
    "CodecError",
    "TemplateError",
    "GalleryConfig",
    "ConversionTask",
    "TaskResult",
    "ScanProgress",
    "TreeScanner",
    "ThumbnailEngine",
    "TranscodeStats",
    "TranscodeProgress",
    "Transcoder",
    "AssetMirror",
    "MirrorStats",
    "AlbumNode",
    "ImageEntry",
    "RenderContext",
    "PageRenderer",
    "AlbumAssembler",
    "BuildReport",
    "Pipeline",
    "Reporter",
]
