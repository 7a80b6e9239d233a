from __future__ import annotations

import unittest
from pathlib import Path

from sidecar.inventory import FileEntry
from sidecar.missing import MissingMedia, find_missing_media, format_missing_media
from sidecar.post import MediaType, Post


class TestFindMissingMedia(unittest.TestCase):
    def test_reports_unmatched_photo_post_once(self) -> None:
        posts = [
            Post(
                id="1001",
                media_type=MediaType.PHOTO,
                url="https://example.tumblr.com/post/1001",
            ),
            Post(id="1001", media_type=MediaType.PHOTO),
            Post(id="1002", media_type=MediaType.PHOTO),
        ]
        inventory = [FileEntry(Path("media/1002_0.jpg"))]

        missing = find_missing_media(posts, inventory)

        self.assertEqual(
            missing,
            [MissingMedia(post_id="1001", url="https://example.tumblr.com/post/1001")],
        )

    def test_text_posts_never_reported(self) -> None:
        posts = [
            Post(id="1", media_type=MediaType.TEXT),
            Post(id="2", media_type=MediaType.OTHER),
        ]

        self.assertEqual(find_missing_media(posts, []), [])

    def test_falls_back_to_media_url(self) -> None:
        post = Post(
            id="5",
            media_type=MediaType.PHOTO,
            media_url="https://64.media.tumblr.com/x/tumblr_5_1280.jpg",
        )

        missing = find_missing_media([post], [])
        self.assertEqual(missing[0].url, "https://64.media.tumblr.com/x/tumblr_5_1280.jpg")

    def test_format(self) -> None:
        self.assertEqual(
            format_missing_media(MissingMedia(post_id="1", url="https://e.x/post/1")),
            "1: https://e.x/post/1",
        )
        self.assertEqual(format_missing_media(MissingMedia(post_id="2")), "2: <no url>")


if __name__ == "__main__":
    unittest.main()
