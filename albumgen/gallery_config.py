"""
GalleryConfig - Build configuration loaded from albumgen.toml.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

import tomli
import tomli_w

from .errors import ConfigError

CONFIG_FILENAME = 'albumgen.toml'

DEFAULT_INPUT = 'input'
DEFAULT_OUTPUT = '_build'
DEFAULT_THEME = '_theme'
DEFAULT_THUMBNAIL_BOX = (450, 300)
DEFAULT_EXTENSIONS = frozenset({'jpg'})

Box = Tuple[int, int]


@dataclass(frozen=True)
class GalleryConfig:
    """
    Immutable configuration for one build.

    Attributes:
        input_root: Directory holding the source photographs
        output_root: Directory the static site is written to
        thumbnail_box: (width, height) the thumbnails are fitted into
        resize_box: Optional (width, height) for main renditions; None copies originals
        theme_root: Theme directory with templates/ and static/
        extensions: Accepted file extensions, without the dot (case-sensitive)
    """
    input_root: Path
    output_root: Path
    thumbnail_box: Box = DEFAULT_THUMBNAIL_BOX
    resize_box: Optional[Box] = None
    theme_root: Path = Path(DEFAULT_THEME)
    extensions: FrozenSet[str] = field(default=DEFAULT_EXTENSIONS)

    @property
    def theme_static_root(self) -> Path:
        return self.theme_root / 'static'

    @property
    def theme_templates_root(self) -> Path:
        return self.theme_root / 'templates'

    @classmethod
    def default(cls) -> 'GalleryConfig':
        """Configuration written by `albumgen new`."""
        return cls(
            input_root=Path(DEFAULT_INPUT),
            output_root=Path(DEFAULT_OUTPUT),
        )

    @classmethod
    def from_dict(cls, data: dict, base_dir: Optional[Path] = None) -> 'GalleryConfig':
        """
        Create a configuration from a parsed TOML document.

        Args:
            data: Parsed configuration document
            base_dir: Directory relative paths are resolved against (default: as given)

        Returns:
            GalleryConfig

        Raises:
            ConfigError: If any field is missing or has the wrong type
        """
        errors = []

        input_root = cls._read_path(data, 'input', errors)
        output_root = cls._read_path(data, 'output', errors)
        theme_root = cls._read_path(data, 'theme', errors, default=DEFAULT_THEME)

        thumbnail_box = cls._read_box(data, 'thumbnail', errors, required=True)
        resize_box = cls._read_box(data, 'resize', errors, required=False)

        extensions = data.get('extensions', sorted(DEFAULT_EXTENSIONS))
        if (not isinstance(extensions, list)
                or not all(isinstance(ext, str) and ext for ext in extensions)):
            errors.append("'extensions' must be a list of non-empty strings")
            extensions = []

        if errors:
            raise ConfigError("Invalid configuration: " + "; ".join(errors))

        if base_dir is not None:
            input_root = base_dir / input_root
            output_root = base_dir / output_root
            theme_root = base_dir / theme_root

        return cls(
            input_root=input_root,
            output_root=output_root,
            thumbnail_box=thumbnail_box,
            resize_box=resize_box,
            theme_root=theme_root,
            extensions=frozenset(ext.lstrip('.') for ext in extensions),
        )

    @classmethod
    def load(cls, path: Path, logger: Optional[logging.Logger] = None) -> 'GalleryConfig':
        """
        Load configuration from a TOML file.

        Relative paths inside the file are resolved against the file's directory.

        Raises:
            ConfigError: If the file is missing, unreadable or malformed
        """
        logger = logger or logging.getLogger(__name__)
        path = Path(path)

        try:
            with open(path, 'rb') as config_file:
                data = tomli.load(config_file)
        except FileNotFoundError as err:
            raise ConfigError(f"Could not open `{path}'.") from err
        except OSError as err:
            raise ConfigError(f"Could not read `{path}': {err}") from err
        except tomli.TOMLDecodeError as err:
            raise ConfigError(f"`{path}' format seems broken: {err}") from err

        logger.debug(f"Loaded configuration from {path}")
        base_dir = path.parent if str(path.parent) not in ('', '.') else None
        return cls.from_dict(data, base_dir=base_dir)

    def to_dict(self) -> dict:
        """Convert to a TOML-serializable dictionary."""
        data = {
            'input': str(self.input_root),
            'output': str(self.output_root),
            'thumbnail': {
                'width': self.thumbnail_box[0],
                'height': self.thumbnail_box[1],
            },
        }
        if self.theme_root != Path(DEFAULT_THEME):
            data['theme'] = str(self.theme_root)
        if self.extensions != DEFAULT_EXTENSIONS:
            data['extensions'] = sorted(self.extensions)
        if self.resize_box is not None:
            data['resize'] = {
                'width': self.resize_box[0],
                'height': self.resize_box[1],
            }
        return data

    def save(self, path: Path) -> None:
        """Write configuration as TOML, replacing any existing file."""
        with open(path, 'wb') as config_file:
            tomli_w.dump(self.to_dict(), config_file)

    def validate(self) -> List[str]:
        """
        Check the configuration against the filesystem.

        Returns:
            List of problems found (empty if the configuration is usable)
        """
        errors = []

        if not self.input_root.is_dir():
            errors.append(f"Input directory does not exist: {self.input_root}")
        if 0 in self.thumbnail_box:
            errors.append("Thumbnail width and height must be greater than zero")
        if self.resize_box is not None and 0 in self.resize_box:
            errors.append("Resize width and height must be greater than zero")
        if not self.extensions:
            errors.append("At least one image extension is required")

        input_abs = os.path.abspath(self.input_root)
        output_abs = os.path.abspath(self.output_root)
        if output_abs == input_abs or output_abs.startswith(input_abs + os.sep):
            errors.append(f"Output directory must not be inside the input directory: {self.output_root}")

        return errors

    @staticmethod
    def _read_path(data: dict, key: str, errors: List[str], default: Optional[str] = None) -> Path:
        value = data.get(key, default)
        if value is None:
            errors.append(f"Missing required field '{key}'")
            return Path()
        if not isinstance(value, str) or not value:
            errors.append(f"'{key}' must be a non-empty path string")
            return Path()
        return Path(value)

    @staticmethod
    def _read_box(data: dict, key: str, errors: List[str], required: bool) -> Optional[Box]:
        table = data.get(key)
        if table is None:
            if required:
                errors.append(f"Missing required table [{key}]")
            return None
        if not isinstance(table, dict):
            errors.append(f"[{key}] must be a table with width and height")
            return None

        width, height = table.get('width'), table.get('height')
        if width is None or height is None:
            errors.append(f"[{key}] needs both width and height")
            return None

        for name, value in (('width', width), ('height', height)):
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(f"{key}.{name} must be an unsigned integer")
                return None

        return width, height
