"""Tests for ThumbnailEngine class."""

import io

import pytest
from PIL import Image

from albumgen.conversion_task import ConversionTask
from albumgen.errors import CodecError
from albumgen.thumbnail_engine import ThumbnailEngine


@pytest.fixture
def task(gallery_root, make_image):
    """Fixture providing a task for an 800x600 JPEG."""
    source = make_image(gallery_root / 'in' / 'a' / 'photo.jpg', size=(800, 600))
    return ConversionTask(source_path=source, dest_path=gallery_root / 'out' / 'a' / 'photo.jpg')


class TestFitSize:
    """Tests for fit_size."""

    def test_landscape(self):
        """Test a landscape image is limited by width."""
        assert ThumbnailEngine.fit_size((800, 600), (100, 100)) == (100, 75)

    def test_portrait(self):
        """Test a portrait image is limited by height."""
        assert ThumbnailEngine.fit_size((600, 800), (450, 300)) == (225, 300)

    def test_never_enlarges(self):
        """Test an image smaller than the box keeps its size."""
        assert ThumbnailEngine.fit_size((50, 40), (450, 300)) == (50, 40)


class TestThumbnailEngine:
    """Tests for ThumbnailEngine class."""

    def test_init_defaults(self):
        """Test default initialization."""
        engine = ThumbnailEngine((450, 300))

        assert engine.resize_box is None
        assert engine.quality == 85

    def test_process_copies_original(self, task, logger):
        """Test without resize the rendition is byte-identical to the source."""
        engine = ThumbnailEngine((100, 100), logger=logger)

        result = engine.process(task)

        assert result.success is True
        assert result.resized is False
        assert task.dest_path.read_bytes() == task.source_path.read_bytes()

    def test_process_writes_thumbnail(self, task, logger):
        """Test the thumbnail lands in thumbnails/ under the same name."""
        engine = ThumbnailEngine((100, 100), logger=logger)

        engine.process(task)

        thumb_path = task.dest_path.parent / 'thumbnails' / 'photo.jpg'
        with Image.open(thumb_path) as img:
            assert img.format == 'JPEG'
            assert img.size == (100, 75)

    def test_process_resizes(self, task, logger):
        """Test with resize the rendition is re-encoded within the box."""
        engine = ThumbnailEngine((100, 100), resize_box=(400, 400), logger=logger)

        result = engine.process(task)

        assert result.success is True
        assert result.resized is True
        with Image.open(task.dest_path) as img:
            assert img.size == (400, 300)

    def test_process_decodes_once(self, task, logger, mocker):
        """Test the thumbnail and the rendition share one decoded image."""
        engine = ThumbnailEngine((100, 100), resize_box=(400, 400), logger=logger)
        spy = mocker.spy(engine, 'decode')

        engine.process(task)

        assert spy.call_count == 1

    def test_process_is_repeatable(self, task, logger):
        """Test an existing thumbnails directory is reused."""
        engine = ThumbnailEngine((100, 100), logger=logger)

        assert engine.process(task).success
        assert engine.process(task).success

    def test_process_invalid_image(self, gallery_root, logger):
        """Test a corrupt image yields a failed result instead of raising."""
        source = gallery_root / 'in' / 'broken.jpg'
        source.write_bytes(b'not an image')
        task = ConversionTask(source_path=source, dest_path=gallery_root / 'out' / 'broken.jpg')
        engine = ThumbnailEngine((100, 100), logger=logger)

        result = engine.process(task)

        assert result.success is False
        assert 'decode' in result.error
        assert not task.dest_path.exists()

    def test_process_missing_source(self, gallery_root, logger):
        """Test a vanished source yields a failed result."""
        task = ConversionTask(
            source_path=gallery_root / 'in' / 'gone.jpg',
            dest_path=gallery_root / 'out' / 'gone.jpg',
        )

        result = ThumbnailEngine((100, 100), logger=logger).process(task)

        assert result.success is False

    def test_decode_invalid(self):
        """Test decoding garbage raises CodecError."""
        with pytest.raises(CodecError):
            ThumbnailEngine((100, 100)).decode(b'not an image')

    def test_encode_png_keeps_alpha(self, sample_png_bytes):
        """Test PNG output stays PNG with transparency."""
        engine = ThumbnailEngine((50, 50))
        image = engine.decode(sample_png_bytes)

        data = engine.encode(engine.fit(image, (50, 50)), 'png')

        result = Image.open(io.BytesIO(data))
        assert result.format == 'PNG'
        assert result.mode == 'RGBA'
        assert result.size == (50, 50)

    def test_encode_jpeg_flattens_alpha(self, sample_png_bytes):
        """Test transparent images are flattened for JPEG output."""
        engine = ThumbnailEngine((50, 50))
        image = engine.decode(sample_png_bytes)

        data = engine.encode(image, 'jpg')

        result = Image.open(io.BytesIO(data))
        assert result.format == 'JPEG'
        assert result.mode == 'RGB'

    def test_encode_unknown_extension(self, sample_image_bytes):
        """Test an extension without an image format raises CodecError."""
        engine = ThumbnailEngine((50, 50))
        image = engine.decode(sample_image_bytes)

        with pytest.raises(CodecError):
            engine.encode(image, 'nope')

    def test_fit_leaves_source_untouched(self, sample_image_bytes):
        """Test fitting returns a new image and keeps the decoded one intact."""
        engine = ThumbnailEngine((50, 50))
        image = engine.decode(sample_image_bytes)

        thumb = engine.fit(image, (50, 50))

        assert thumb.size == (50, 50)
        assert image.size == (100, 100)
