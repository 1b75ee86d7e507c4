"""
PageRenderer - Renders album pages with Jinja2.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import jinja2

from .album import RenderContext
from .errors import TemplateError

INDEX_TEMPLATE = 'index.html'


class PageRenderer:
    """
    Renders templates from a theme directory.

    Templates are looked up in the theme's templates/ directory first and then
    in the default templates bundled with the package.
    """

    def __init__(
        self,
        templates_root: Optional[Path] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize renderer.

        Args:
            templates_root: Theme template directory (optional)
            logger: Optional logger instance
        """
        self.templates_root = Path(templates_root) if templates_root else None
        self.logger = logger or logging.getLogger(__name__)

        loaders = []
        if self.templates_root is not None and self.templates_root.is_dir():
            loaders.append(jinja2.FileSystemLoader(str(self.templates_root)))
        else:
            self.logger.debug(f"No theme templates at {self.templates_root}, using bundled templates")
        loaders.append(jinja2.PackageLoader('albumgen', 'templates'))

        self.env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            autoescape=jinja2.select_autoescape(['html', 'htm', 'xml']),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, context: Union[RenderContext, dict]) -> bytes:
        """
        Render a template to UTF-8 markup.

        Args:
            template_name: Template file name, e.g. 'index.html'
            context: RenderContext (or its dictionary form)

        Returns:
            Rendered markup as bytes

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        if isinstance(context, RenderContext):
            context = context.to_dict()

        try:
            template = self.env.get_template(template_name)
            return template.render(**context).encode('utf-8')
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Template not found: {e.name}") from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render {template_name}: {e}") from e
