"""
TreeScanner - Walks the input tree and finds images whose output is stale.
"""

import logging
import os
import time
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from .conversion_task import RESERVED_DIRS, ConversionTask
from .errors import PathError
from .scan_progress import ScanProgress


def is_stale(source: Path, dest: Path) -> bool:
    """
    Decide whether dest must be regenerated from source.

    True iff dest does not exist or was modified strictly before source.
    """
    try:
        dest_mtime = os.stat(dest).st_mtime_ns
    except FileNotFoundError:
        return True
    return dest_mtime < os.stat(source).st_mtime_ns


def has_extension(path: Path, extensions: Iterable[str]) -> bool:
    """Case-sensitive match of the path's suffix (without the dot) against extensions."""
    suffix = path.suffix
    return bool(suffix) and suffix[1:] in extensions


def mirror_path(path: Path, input_root: Path, output_root: Path) -> Path:
    """
    Map a path under input_root to the same relative location under output_root.

    in/a/b/photo.jpg -> out/a/b/photo.jpg

    Raises:
        PathError: If path is not below input_root
    """
    try:
        relative = Path(path).relative_to(input_root)
    except ValueError as err:
        raise PathError(f"{path} is not inside {input_root}") from err

    if not relative.parts:
        raise PathError(f"Cannot mirror {path}: no path components below {input_root}")

    return output_root.joinpath(relative)


def enters_loop(dirpath: str, branches: Dict[str, FrozenSet[Tuple[int, int]]]) -> bool:
    """
    Check a directory reached by a top-down walk that follows symbolic links.

    branches maps each visited directory to the (st_dev, st_ino) pairs of its
    ancestors and itself. Only a link back to an ancestor on the same branch
    is a loop; the same directory reached through another path is not.

    Returns:
        True if dirpath must not be descended into

    Raises:
        OSError: If dirpath cannot be stat'ed
    """
    st = os.stat(dirpath)
    key = (st.st_dev, st.st_ino)
    dirpath = os.path.normpath(dirpath)
    ancestors = branches.get(os.path.dirname(dirpath), frozenset())
    if key in ancestors:
        return True
    branches[dirpath] = ancestors | {key}
    return False


class TreeScanner:
    """
    Scans the input tree and produces the transcode work list.

    Symbolic links are followed; a link back to an ancestor directory is not
    descended into. Directories named like generated output (thumbnails,
    static) are skipped.
    Unreadable entries are logged and skipped, they never abort the scan.
    """

    def __init__(
        self,
        input_root: Path,
        output_root: Path,
        extensions: Iterable[str],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize scanner.

        Args:
            input_root: Directory holding the source images
            output_root: Directory the mirrored tree is written to
            extensions: Accepted file extensions, without the dot
            logger: Optional logger instance
        """
        self.input_root = Path(input_root)
        self.output_root = Path(output_root)
        self.extensions = frozenset(extensions)
        self.logger = logger or logging.getLogger(__name__)
        self.skipped = 0
        self.up_to_date = 0

    def scan(self, progress: Optional[ScanProgress] = None) -> List[ConversionTask]:
        """
        Find all images whose main rendition is missing or older than the source.

        Args:
            progress: Optional progress tracker for callbacks

        Returns:
            List of ConversionTask in no particular order
        """
        start_time = time.time()
        self.skipped = 0
        self.up_to_date = 0
        tasks = []

        self.logger.info(f"Scanning {self.input_root} for {', '.join(sorted(self.extensions))} images")

        for source in self._walk_files():
            try:
                dest = mirror_path(source, self.input_root, self.output_root)
                stale = is_stale(source, dest)
            except PathError as e:
                self.logger.warning(f"Skipping {source}: {e}")
                self.skipped += 1
                continue
            except OSError as e:
                self.logger.warning(f"Skipping {source}: {e}")
                self.skipped += 1
                continue

            task = ConversionTask(source_path=source, dest_path=dest)
            if progress:
                progress.on_file_scanned(task, stale)

            if stale:
                self.logger.debug(f"Stale: {source}")
                tasks.append(task)
            else:
                self.up_to_date += 1

        self.logger.info(
            f"Scan complete: {len(tasks)} to build, {self.up_to_date} up to date, "
            f"{self.skipped} skipped ({time.time() - start_time:.1f}s)"
        )

        return tasks

    def _walk_files(self) -> Iterator[Path]:
        """Yield regular files with an accepted extension below the input root."""
        branches = {}

        for dirpath, dirnames, filenames in os.walk(
            self.input_root, followlinks=True, onerror=self._on_walk_error
        ):
            try:
                loop = enters_loop(dirpath, branches)
            except OSError as e:
                self._on_walk_error(e)
                dirnames[:] = []
                continue

            if loop:
                self.logger.warning(f"Skipping {dirpath}: directory loop")
                dirnames[:] = []
                continue

            for name in dirnames:
                if name in RESERVED_DIRS:
                    self.logger.warning(
                        f"Skipping {os.path.join(dirpath, name)}: '{name}' is reserved for generated output"
                    )
                    self.skipped += 1
            dirnames[:] = [name for name in dirnames if name not in RESERVED_DIRS]

            for name in filenames:
                path = Path(dirpath) / name
                if not has_extension(path, self.extensions):
                    continue
                # is_file() follows links and is False for broken links and special files
                if not path.is_file():
                    self.logger.debug(f"Skipping {path}: not a regular file")
                    continue
                yield path

    def _on_walk_error(self, error: OSError) -> None:
        self.logger.warning(f"Skipping {error.filename}: {error.strerror or error}")
        self.skipped += 1
