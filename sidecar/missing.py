from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .inventory import FileEntry, entry_matches_post
from .post import MediaType, Post


@dataclass(frozen=True)
class MissingMedia:
    post_id: str
    url: str | None = None


def find_missing_media(posts: Iterable[Post], inventory: Sequence[FileEntry]) -> list[MissingMedia]:
    """Photo posts with no file in the inventory, once per post id, in document order."""
    out: list[MissingMedia] = []
    seen: set[str] = set()

    for post in posts:
        if post.media_type is not MediaType.PHOTO or post.id in seen:
            continue
        seen.add(post.id)
        if any(entry_matches_post(entry, post.id) for entry in inventory):
            continue
        out.append(MissingMedia(post_id=post.id, url=post.url or post.media_url))

    return out


def format_missing_media(item: MissingMedia) -> str:
    return f"{item.post_id}: {item.url or '<no url>'}"
