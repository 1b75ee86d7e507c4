"""
ThumbnailEngine - Turns one source image into a thumbnail and a main rendition.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image

from .conversion_task import ConversionTask, TaskResult
from .errors import CodecError

Box = Tuple[int, int]


class ThumbnailEngine:
    """
    Generates thumbnails and main renditions using Pillow.

    The source is read and decoded once per task; both outputs are derived
    from the same decoded image.
    """

    OUTPUT_FORMATS = {
        'jpg': 'JPEG',
        'jpeg': 'JPEG',
        'png': 'PNG',
        'gif': 'GIF',
        'webp': 'WEBP',
        'tif': 'TIFF',
        'tiff': 'TIFF',
        'bmp': 'BMP',
    }

    def __init__(
        self,
        thumbnail_box: Box,
        resize_box: Optional[Box] = None,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize engine.

        Args:
            thumbnail_box: (width, height) thumbnails are fitted into
            resize_box: Optional (width, height) main renditions are fitted into;
                None copies the source bytes verbatim
            quality: JPEG/WebP quality for re-encoded output (default: 85)
            logger: Optional logger instance
        """
        self.thumbnail_box = thumbnail_box
        self.resize_box = resize_box
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def process(self, task: ConversionTask) -> TaskResult:
        """
        Write the thumbnail and the main rendition for one task.

        Failures are returned as a failed TaskResult rather than raised, so one
        bad image never affects other tasks.

        Args:
            task: Source and destination paths

        Returns:
            TaskResult describing what was written
        """
        try:
            task.thumbnail_dir.mkdir(parents=True, exist_ok=True)

            source_data = task.source_path.read_bytes()
            image = self.decode(source_data)

            thumb_data = self.encode(self.fit(image, self.thumbnail_box), task.extension)
            task.thumbnail_path.write_bytes(thumb_data)
            self.logger.debug(f"Wrote thumbnail: {task.thumbnail_path} ({len(thumb_data)} bytes)")

            if self.resize_box is not None:
                rendition_data = self.encode(self.fit(image, self.resize_box), task.extension)
            else:
                rendition_data = source_data
            task.dest_path.write_bytes(rendition_data)
            self.logger.debug(f"Wrote rendition: {task.dest_path} ({len(rendition_data)} bytes)")

            return TaskResult(
                task=task,
                success=True,
                thumbnail_bytes=len(thumb_data),
                rendition_bytes=len(rendition_data),
                resized=self.resize_box is not None,
            )

        except (CodecError, OSError) as e:
            self.logger.error(f"Error processing {task.source_path}: {e}")
            return TaskResult.failed(task, str(e))

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode image bytes into a fully loaded Pillow image.

        Raises:
            CodecError: If the data is not a readable image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return img
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise CodecError(f"Cannot decode image: {e}") from e

    @staticmethod
    def fit_size(size: Box, box: Box) -> Box:
        """
        Largest size with the same aspect ratio as size that fits inside box.

        Images smaller than the box are never enlarged.
        """
        width, height = size
        scale = min(box[0] / width, box[1] / height, 1.0)
        return max(1, round(width * scale)), max(1, round(height * scale))

    def fit(self, image: Image.Image, box: Box) -> Image.Image:
        """Resample image to fit box with a Lanczos filter, leaving image untouched."""
        target = self.fit_size(image.size, box)
        if target == image.size:
            return image.copy()
        try:
            return image.resize(target, Image.Resampling.LANCZOS)
        except (OSError, ValueError) as e:
            raise CodecError(f"Cannot resample image to {target[0]}x{target[1]}: {e}") from e

    def encode(self, image: Image.Image, extension: str) -> bytes:
        """
        Encode image in the format matching extension.

        Raises:
            CodecError: If Pillow cannot write the format
        """
        output_format = self._get_output_format(extension)
        output = io.BytesIO()

        try:
            if output_format == 'JPEG':
                image = self._convert_color_mode(image)
                image.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'WEBP':
                image.save(output, format='WEBP', quality=self.quality)
            elif output_format == 'PNG':
                image.save(output, format='PNG', optimize=True)
            else:
                image.save(output, format=output_format)
        except (OSError, ValueError, KeyError) as e:
            raise CodecError(f"Cannot encode image as {output_format}: {e}") from e

        return output.getvalue()

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for formats without an alpha channel."""
        if img.mode in ('RGBA', 'LA', 'P'):
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode not in ('RGB', 'L', 'CMYK'):
            return img.convert('RGB')
        return img

    def _get_output_format(self, extension: str) -> str:
        """Pillow format name for an extension (without the dot)."""
        ext_lower = extension.lower()
        if ext_lower in self.OUTPUT_FORMATS:
            return self.OUTPUT_FORMATS[ext_lower]
        registered = Image.registered_extensions().get(f".{ext_lower}")
        if registered is None:
            raise CodecError(f"No image format known for extension '{extension}'")
        return registered

    def __repr__(self) -> str:
        resize = f"{self.resize_box[0]}x{self.resize_box[1]}" if self.resize_box else 'copy'
        return (
            f"ThumbnailEngine(thumbnail={self.thumbnail_box[0]}x{self.thumbnail_box[1]}, "
            f"resize={resize})"
        )
