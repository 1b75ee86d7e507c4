"""
Exception types raised by the build pipeline.
"""


class AlbumgenError(Exception):
    """Base class for all albumgen errors."""


class ConfigError(AlbumgenError):
    """Configuration is missing, unreadable or malformed."""


class PathError(AlbumgenError):
    """A destination path cannot be derived for a scanned entry."""


class CodecError(AlbumgenError):
    """An image could not be decoded, resampled or encoded."""


class TemplateError(AlbumgenError):
    """A page template is missing or failed to render."""
