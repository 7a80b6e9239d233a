from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Mapping, Optional
from urllib.parse import urlsplit

from lxml import etree

from .errors import MalformedPostsError, MissingAttributeError
from .post import MediaType, Post
from .run_log import RunLogger

_CHUNK_SIZE = 64 * 1024

_TEXT_POST_TYPES = frozenset({"regular", "text"})


class _Opened(Enum):
    POST = "post"
    TAG = "tag"
    PHOTO_URL = "photo-url"
    OTHER = "other"


def extension_from_url(url: str) -> str | None:
    """
    Return the suffix after the final '.' of the URL's last path segment.

    Returns None when the segment has no dot-separated suffix.
    """
    value = (url or "").strip()
    if not value:
        return None

    try:
        path = urlsplit(value).path
    except ValueError:
        path = value

    segment = path.rsplit("/", 1)[-1]
    stem, dot, ext = segment.rpartition(".")
    if not dot or not stem or not ext:
        return None
    return ext


@dataclass
class _PostBuilder:
    id: str
    tags: list[str] = field(default_factory=list)
    media_extension: str | None = None
    media_type: MediaType = MediaType.TEXT
    image_count: int = 0
    url: str | None = None
    media_url: str | None = None

    def seal(self) -> Post:
        return Post(
            id=self.id,
            tags=tuple(self.tags),
            media_extension=self.media_extension,
            media_type=self.media_type,
            image_count=self.image_count,
            url=self.url,
            media_url=self.media_url,
        )


def _media_type_from_attr(value: str | None) -> MediaType:
    kind = (value or "").strip().casefold()
    if not kind or kind in _TEXT_POST_TYPES:
        return MediaType.TEXT
    # Only a <photo> element makes a post PHOTO.
    return MediaType.OTHER


class _PostsTarget:
    """
    lxml parser target tracking only the most recently opened element.

    The export never nests recognized elements inside themselves, so the last opened
    element is enough to decide where a text node belongs.
    """

    def __init__(self, tag_mappings: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._mappings = tag_mappings
        self._opened = _Opened.OTHER
        self._post: _PostBuilder | None = None
        self._text: list[str] = []
        self.posts: list[Post] = []

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self._flush_text()
        name = etree.QName(tag).localname

        if name == "post":
            self._opened = _Opened.POST
            post_id = attrib.get("id") or ""
            if not post_id:
                raise MissingAttributeError("Post missing required attribute 'id'")
            self._post = _PostBuilder(
                id=post_id,
                media_type=_media_type_from_attr(attrib.get("type")),
                url=(attrib.get("url") or "").strip() or None,
            )
        elif name == "tag":
            self._opened = _Opened.TAG
        elif name == "photo-url":
            self._opened = _Opened.PHOTO_URL
        elif name == "photo":
            self._opened = _Opened.OTHER
            if self._post is not None:
                self._post.image_count += 1
                self._post.media_type = MediaType.PHOTO
        else:
            self._opened = _Opened.OTHER

    def end(self, tag: str) -> None:
        self._flush_text()
        if etree.QName(tag).localname != "post":
            return

        if self._post is not None:
            self.posts.append(self._post.seal())
        self._post = None

    def data(self, data: str) -> None:
        self._text.append(data)

    def close(self) -> list[Post]:
        self._flush_text()
        return self.posts

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text)
        self._text = []

        if not text.strip() or self._post is None:
            return

        if self._opened is _Opened.TAG:
            self._add_tag(self._post, text)
        elif self._opened is _Opened.PHOTO_URL:
            self._add_photo_url(self._post, text)

    def _add_tag(self, post: _PostBuilder, text: str) -> None:
        if self._mappings is not None and text in self._mappings:
            dest = self._mappings[text]
            if dest is not None:
                post.tags.append(dest)
            return
        post.tags.append(text)

    def _add_photo_url(self, post: _PostBuilder, text: str) -> None:
        url = text.strip()
        if post.media_url is None:
            post.media_url = url
        if post.media_extension is None:
            post.media_extension = extension_from_url(url)


def _new_parser(target: _PostsTarget) -> etree.XMLParser:
    return etree.XMLParser(
        target=target,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def _feed(parser: etree.XMLParser, fh: IO[bytes]) -> list[Post]:
    while True:
        chunk = fh.read(_CHUNK_SIZE)
        if not chunk:
            break
        parser.feed(chunk)
    return parser.close()


def parse_posts(
    source: str | Path | IO[bytes],
    tag_mappings: Optional[Mapping[str, Optional[str]]] = None,
    *,
    logger: RunLogger | None = None,
) -> list[Post]:
    """
    Stream a posts export into Post records in document order.

    Raises MissingAttributeError for a post without an id and MalformedPostsError when
    the document is not well-formed or cannot be read.
    """
    target = _PostsTarget(tag_mappings)
    parser = _new_parser(target)
    if isinstance(source, (str, Path)):
        label = str(source)
    else:
        label = getattr(source, "name", None)

    if logger is not None:
        logger.info("parse_started", path=label, mappings=len(tag_mappings or {}))

    try:
        if isinstance(source, (str, Path)):
            try:
                fh = Path(source).open("rb")
            except OSError as e:
                raise MalformedPostsError(f"Unable to open posts file at {source}: {e}") from e
            with fh:
                posts = _feed(parser, fh)
        else:
            posts = _feed(parser, source)
    except etree.XMLSyntaxError as e:
        where = f" in {label}" if label else ""
        raise MalformedPostsError(f"Malformed posts XML{where}: {e}") from e
    except OSError as e:
        raise MalformedPostsError(f"Failed to read posts file {label}: {e}") from e

    if logger is not None:
        logger.info("parse_completed", path=label, posts=len(posts))

    return posts
