"""
Pytest fixtures for albumgen tests.
"""

import io
import os
import logging

import pytest
from PIL import Image


THEME_JSON_TEMPLATE = '{"album": {{ album | tojson }}, "theme": {{ theme | tojson }}}'


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    img = Image.new('RGB', (100, 100), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes."""
    # Create a simple test image with transparency
    img = Image.new('RGBA', (100, 100), color=(255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def make_image():
    """Fixture providing a factory that writes a real image file."""
    def _make_image(path, size=(800, 600), color='blue', fmt='JPEG'):
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new('RGB', size, color=color).save(path, format=fmt)
        return path
    return _make_image


@pytest.fixture
def touch_later():
    """Fixture providing a helper that moves a file's mtime into the future."""
    def _touch_later(path, seconds=10):
        st = os.stat(path)
        later = st.st_mtime_ns + seconds * 1_000_000_000
        os.utime(path, ns=(later, later))
    return _touch_later


@pytest.fixture
def gallery_root(tmp_path):
    """Fixture providing a directory with empty in/ and _theme/ subdirectories."""
    (tmp_path / 'in').mkdir()
    (tmp_path / '_theme' / 'templates').mkdir(parents=True)
    return tmp_path


@pytest.fixture
def json_theme(gallery_root):
    """Fixture providing a theme whose index page is the render context as JSON."""
    template = gallery_root / '_theme' / 'templates' / 'index.html'
    template.write_text(THEME_JSON_TEMPLATE)
    return gallery_root / '_theme'


@pytest.fixture
def gallery_config(gallery_root):
    """Fixture providing a factory for a GalleryConfig rooted in gallery_root."""
    from albumgen.gallery_config import GalleryConfig

    def _gallery_config(thumbnail_box=(100, 100), resize_box=None, extensions=('jpg',)):
        return GalleryConfig(
            input_root=gallery_root / 'in',
            output_root=gallery_root / 'out',
            thumbnail_box=thumbnail_box,
            resize_box=resize_box,
            theme_root=gallery_root / '_theme',
            extensions=frozenset(extensions),
        )
    return _gallery_config
