"""Tests for the album view models."""

from albumgen.album import AlbumNode, ImageEntry, RenderContext


class TestAlbumNode:
    """Tests for AlbumNode class."""

    def test_representative_thumbnail_empty(self):
        """Test an album without images has no representative thumbnail."""
        album = AlbumNode(title='trips', static_root_relative_path='../static', sub_albums=['2019/'])

        assert album.representative_thumbnail is None
        assert album.to_context()['thumbnail'] is None

    def test_representative_thumbnail_first_image(self):
        """Test the first image's thumbnail represents the album."""
        album = AlbumNode(
            title='trips',
            static_root_relative_path='../static',
            images=[ImageEntry.for_image('a.jpg'), ImageEntry.for_image('b.jpg')],
        )

        assert album.representative_thumbnail == 'thumbnails/a.jpg'

    def test_to_context(self):
        """Test the album section of the render context."""
        album = AlbumNode(
            title='trips',
            static_root_relative_path='../static',
            images=[ImageEntry.for_image('a.jpg')],
            sub_albums=['2019/'],
        )

        assert album.to_context() == {
            'title': 'trips',
            'images': [{'image': 'a.jpg', 'thumbnail': 'thumbnails/a.jpg'}],
            'albums': ['2019/'],
            'thumbnail': 'thumbnails/a.jpg',
        }


class TestRenderContext:
    """Tests for RenderContext class."""

    def test_to_dict(self):
        """Test the context carries album and theme sections."""
        album = AlbumNode(title='out', static_root_relative_path='static')

        context = RenderContext(album).to_dict()

        assert set(context) == {'album', 'theme'}
        assert context['theme'] == {'url': 'static'}
        assert context['album']['title'] == 'out'
