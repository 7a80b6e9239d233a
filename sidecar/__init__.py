from __future__ import annotations

from .config import apply_overrides, load_config
from .config_schema import AppConfig
from .counter import TagCount, TagCounter, count_tags
from .errors import (
    ConfigError,
    DirectoryUnavailableError,
    MalformedPostsError,
    MappingFormatError,
    MissingAttributeError,
    ParseError,
    SidecarWriteError,
)
from .generate import GenerateResult, write_sidecar_files
from .inventory import FileEntry, build_inventory
from .mappings import load_tag_mappings
from .missing import MissingMedia, find_missing_media
from .parser import parse_posts
from .post import MediaType, Post

__all__ = [
    "AppConfig",
    "ConfigError",
    "DirectoryUnavailableError",
    "FileEntry",
    "GenerateResult",
    "MalformedPostsError",
    "MappingFormatError",
    "MediaType",
    "MissingAttributeError",
    "MissingMedia",
    "ParseError",
    "Post",
    "SidecarWriteError",
    "TagCount",
    "TagCounter",
    "apply_overrides",
    "build_inventory",
    "count_tags",
    "find_missing_media",
    "load_config",
    "load_tag_mappings",
    "parse_posts",
    "write_sidecar_files",
]
