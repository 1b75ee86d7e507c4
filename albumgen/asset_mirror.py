"""
AssetMirror - Copies the theme's static assets into the output tree.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .conversion_task import STATIC_DIR
from .tree_scanner import enters_loop, is_stale


@dataclass
class MirrorStats:
    """
    Statistics for one mirror pass.

    Attributes:
        directories_created: Destination directories that did not exist yet
        files_copied: Files copied because they were missing or stale
        up_to_date: Files left alone
        bytes_copied: Total size of copied files
    """
    directories_created: int = 0
    files_copied: int = 0
    up_to_date: int = 0
    bytes_copied: int = 0


class AssetMirror:
    """
    Mirrors a theme's static tree into output_root/static.

    Files are copied byte for byte, never transcoded, and only when the
    destination is missing or older than the source. Symbolic links are
    followed like in the input tree. I/O errors propagate.
    """

    def __init__(
        self,
        theme_static_root: Path,
        output_root: Path,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize mirror.

        Args:
            theme_static_root: Theme asset directory (may not exist)
            output_root: Root of the generated site
            logger: Optional logger instance
        """
        self.source_root = Path(theme_static_root)
        self.dest_root = Path(output_root) / STATIC_DIR
        self.logger = logger or logging.getLogger(__name__)

    def mirror(self) -> MirrorStats:
        """
        Bring output_root/static up to date with the theme's assets.

        Returns:
            MirrorStats; all zero if the theme has no static directory
        """
        stats = MirrorStats()

        if not self.source_root.is_dir():
            self.logger.debug(f"No theme assets at {self.source_root}, nothing to mirror")
            return stats

        branches = {}

        for dirpath, dirnames, filenames in os.walk(self.source_root, followlinks=True):
            if enters_loop(dirpath, branches):
                self.logger.warning(f"Skipping {dirpath}: directory loop")
                dirnames[:] = []
                continue

            source_dir = Path(dirpath)
            dest_dir = self.dest_root / source_dir.relative_to(self.source_root)

            if not dest_dir.is_dir():
                dest_dir.mkdir(parents=True, exist_ok=True)
                stats.directories_created += 1

            for name in filenames:
                source = source_dir / name
                dest = dest_dir / name

                if not is_stale(source, dest):
                    stats.up_to_date += 1
                    continue

                shutil.copyfile(source, dest)
                stats.files_copied += 1
                stats.bytes_copied += dest.stat().st_size
                self.logger.debug(f"Copied asset: {dest}")

        self.logger.info(
            f"Assets mirrored: {stats.files_copied} copied, {stats.up_to_date} up to date"
        )

        return stats
