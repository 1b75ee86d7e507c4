"""Tests for PageRenderer class."""

import json

import pytest

from albumgen.album import AlbumNode, ImageEntry, RenderContext
from albumgen.errors import TemplateError
from albumgen.renderer import PageRenderer


@pytest.fixture
def context():
    album = AlbumNode(
        title='Trips <2019>',
        static_root_relative_path='../static',
        images=[ImageEntry.for_image('beach.jpg')],
        sub_albums=['spain/'],
    )
    return RenderContext(album)


class TestPageRenderer:
    """Tests for PageRenderer class."""

    def test_bundled_template(self, tmp_path, context, logger):
        """Test the bundled index.html is used when the theme has none."""
        renderer = PageRenderer(tmp_path / 'missing', logger=logger)

        markup = renderer.render('index.html', context).decode('utf-8')

        assert 'thumbnails/beach.jpg' in markup
        assert 'href="spain/index.html"' in markup
        assert '../static/style.css' in markup

    def test_title_is_escaped(self, tmp_path, context, logger):
        """Test album titles are HTML-escaped."""
        markup = PageRenderer(tmp_path, logger=logger).render('index.html', context)

        assert b'Trips &lt;2019&gt;' in markup

    def test_theme_template_overrides_bundled(self, json_theme, context, logger):
        """Test a theme template takes precedence over the bundled one."""
        renderer = PageRenderer(json_theme / 'templates', logger=logger)

        data = json.loads(renderer.render('index.html', context))

        assert data['theme'] == {'url': '../static'}
        assert data['album']['images'] == [{'image': 'beach.jpg', 'thumbnail': 'thumbnails/beach.jpg'}]

    def test_accepts_dict_context(self, json_theme, context, logger):
        """Test a plain dictionary context renders the same."""
        renderer = PageRenderer(json_theme / 'templates', logger=logger)

        assert renderer.render('index.html', context.to_dict()) == renderer.render('index.html', context)

    def test_missing_template(self, tmp_path, context, logger):
        """Test an unknown template raises TemplateError."""
        with pytest.raises(TemplateError, match='not found'):
            PageRenderer(tmp_path, logger=logger).render('album.html', context)

    def test_broken_template(self, gallery_root, context, logger):
        """Test a template syntax error raises TemplateError."""
        templates = gallery_root / '_theme' / 'templates'
        (templates / 'index.html').write_text('{% for %}')

        with pytest.raises(TemplateError):
            PageRenderer(templates, logger=logger).render('index.html', context)

    def test_undefined_variable(self, gallery_root, context, logger):
        """Test referencing an unknown context field raises TemplateError."""
        templates = gallery_root / '_theme' / 'templates'
        (templates / 'index.html').write_text('{{ album.nope.deeper }}')

        with pytest.raises(TemplateError):
            PageRenderer(templates, logger=logger).render('index.html', context)
