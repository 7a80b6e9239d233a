from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class ParseError(RuntimeError):
    """Base class for failures while reading a posts export."""


class MissingAttributeError(ParseError):
    """Raised when a post element lacks a required attribute."""


class MalformedPostsError(ParseError):
    """Raised when the posts export is not well-formed XML or cannot be read."""


class DirectoryUnavailableError(RuntimeError):
    """Raised when the media directory cannot be listed."""


class MappingFormatError(RuntimeError):
    """Raised when a tag mapping file cannot be read or has a malformed line."""


class SidecarWriteError(RuntimeError):
    """Raised when creating or writing a sidecar file fails."""
