"""
AlbumAssembler - Builds album view models from the output tree and renders index pages.
"""

import logging
import os
import posixpath
from pathlib import Path
from typing import Iterable, List, Optional

from .album import AlbumNode, ImageEntry, RenderContext
from .conversion_task import RESERVED_DIRS, STATIC_DIR
from .renderer import INDEX_TEMPLATE, PageRenderer
from .tree_scanner import has_extension

INDEX_FILENAME = 'index.html'


def static_root_path(depth: int) -> str:
    """Relative path from an album `depth` levels below the output root to the static root."""
    return posixpath.join(*(['..'] * depth), STATIC_DIR)


class AlbumAssembler:
    """
    Writes an index page for every album directory of the output tree.

    Must run after transcoding and asset mirroring: it reads the final shape
    of the output tree. Directories named `thumbnails` or `static` are never
    albums. Children are listed in lexicographic order.
    """

    def __init__(
        self,
        output_root: Path,
        extensions: Iterable[str],
        renderer: PageRenderer,
        template_name: str = INDEX_TEMPLATE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize assembler.

        Args:
            output_root: Root of the generated site
            extensions: Accepted image extensions, without the dot
            renderer: Object with render(template_name, context) -> bytes
            template_name: Template used for every album page
            logger: Optional logger instance
        """
        self.output_root = Path(output_root)
        self.extensions = frozenset(extensions)
        self.renderer = renderer
        self.template_name = template_name
        self.logger = logger or logging.getLogger(__name__)

    def assemble(self) -> List[Path]:
        """
        Render index.html for every album.

        Returns:
            Paths of the written index pages

        Raises:
            TemplateError: If rendering fails
            OSError: If a page cannot be written
        """
        written = []

        if not self.output_root.is_dir():
            self.logger.warning(f"Output directory {self.output_root} does not exist, no albums to assemble")
            return written

        for dirpath, dirnames, filenames in os.walk(self.output_root):
            dirnames[:] = sorted(name for name in dirnames if name not in RESERVED_DIRS)

            album_dir = Path(dirpath)
            album = self.build_album(album_dir, dirnames, filenames)

            index_path = album_dir / INDEX_FILENAME
            index_path.write_bytes(self.renderer.render(self.template_name, RenderContext(album)))
            written.append(index_path)

            self.logger.debug(
                f"Wrote {index_path}: {len(album.images)} images, {len(album.sub_albums)} albums"
            )

        self.logger.info(f"Albums assembled: {len(written)} index pages")

        return written

    def build_album(
        self,
        album_dir: Path,
        dirnames: Iterable[str],
        filenames: Iterable[str]
    ) -> AlbumNode:
        """
        Build the view model of one album from its direct children.

        Args:
            album_dir: Album directory under the output root
            dirnames: Names of child directories
            filenames: Names of child files

        Returns:
            AlbumNode
        """
        depth = len(album_dir.relative_to(self.output_root).parts)

        images = [
            ImageEntry.for_image(name)
            for name in sorted(filenames)
            if name != INDEX_FILENAME and has_extension(Path(name), self.extensions)
        ]
        sub_albums = [
            f"{name}/"
            for name in sorted(dirnames)
            if name not in RESERVED_DIRS
        ]

        return AlbumNode(
            title=album_dir.name or album_dir.resolve().name,
            static_root_relative_path=static_root_path(depth),
            images=images,
            sub_albums=sub_albums,
        )
