"""
Album view models handed to the page renderer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .conversion_task import THUMBNAILS_DIR


@dataclass(frozen=True)
class ImageEntry:
    """
    One image of an album.

    Attributes:
        image_name: File name of the main rendition
        thumbnail_relative_path: Thumbnail path relative to the album directory
    """
    image_name: str
    thumbnail_relative_path: str

    @classmethod
    def for_image(cls, image_name: str) -> 'ImageEntry':
        return cls(image_name, f"{THUMBNAILS_DIR}/{image_name}")

    def to_context(self) -> dict:
        return {
            'image': self.image_name,
            'thumbnail': self.thumbnail_relative_path,
        }


@dataclass
class AlbumNode:
    """
    View model of one album directory.

    Attributes:
        title: Directory name
        images: Images directly inside the directory
        sub_albums: Child album names, each ending in '/'
        static_root_relative_path: Path from this album to the mirrored static root
    """
    title: str
    static_root_relative_path: str
    images: List[ImageEntry] = field(default_factory=list)
    sub_albums: List[str] = field(default_factory=list)

    @property
    def representative_thumbnail(self) -> Optional[str]:
        """Thumbnail of the first image, or None for an album without images."""
        if self.images:
            return self.images[0].thumbnail_relative_path
        return None

    def to_context(self) -> dict:
        return {
            'title': self.title,
            'images': [image.to_context() for image in self.images],
            'albums': list(self.sub_albums),
            'thumbnail': self.representative_thumbnail,
        }


@dataclass
class RenderContext:
    """
    Everything a page template receives.

    Serialized as two sections: `album` and `theme` (with `url`, the relative
    path to the static asset root).
    """
    album: AlbumNode

    @property
    def theme_url(self) -> str:
        return self.album.static_root_relative_path

    def to_dict(self) -> dict:
        return {
            'album': self.album.to_context(),
            'theme': {'url': self.theme_url},
        }
