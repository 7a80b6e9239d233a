from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MediaType(str, Enum):
    TEXT = "text"
    PHOTO = "photo"
    OTHER = "other"


@dataclass(frozen=True)
class Post:
    """A sealed post record parsed from a posts export."""

    id: str
    tags: tuple[str, ...] = ()

    media_extension: str | None = None
    media_type: MediaType = MediaType.TEXT
    image_count: int = 0

    url: str | None = None
    media_url: str | None = None


def declared_media_count(post: Post) -> int:
    """
    Number of media files the export itself declares for a post.

    Photosets declare one file per photo element; a single-media post declares one
    file when a media extension was found.
    """
    if post.image_count > 0:
        return int(post.image_count)
    return 1 if post.media_extension else 0
