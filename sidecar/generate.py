from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from .errors import SidecarWriteError
from .inventory import FileEntry, entry_matches_post, normalize_extension
from .post import Post, declared_media_count
from .run_log import RunLogger


@dataclass(frozen=True)
class GenerateResult:
    posts: int
    matched_posts: int
    sidecars_written: int
    skipped_missing: int


def tag_payload(tags: Iterable[str]) -> bytes:
    """One tag per line, each line terminated by a newline."""
    return "".join(f"{tag}\n" for tag in tags).encode("utf-8")


def sidecar_path(media_path: Path, *, sidecar_extension: str = "txt") -> Path:
    return media_path.with_name(f"{media_path.name}.{normalize_extension(sidecar_extension)}")


def _write_sidecar(path: Path, payload: bytes) -> None:
    try:
        with path.open("wb") as fh:
            fh.write(payload)
    except OSError as e:
        raise SidecarWriteError(f"Failed to write sidecar file {path}: {e}") from e


def write_sidecar_files(
    posts: Sequence[Post],
    inventory: Sequence[FileEntry],
    *,
    sidecar_extension: str = "txt",
    logger: RunLogger | None = None,
) -> GenerateResult:
    """
    Write a tag sidecar next to every inventory file whose name starts with a post id.

    Matching by id prefix also covers media added by reblogs, which the export does not
    list under the original post. Existing sidecars are overwritten. The first write
    failure aborts the run; sidecars already written are left in place.
    """
    matched_posts = 0
    written = 0
    skipped = 0

    for post in posts:
        matches = [entry for entry in inventory if entry_matches_post(entry, post.id)]
        if matches:
            matched_posts += 1

        declared = declared_media_count(post)
        if logger is not None and len(matches) < declared:
            logger.warning(
                "media_count_mismatch",
                post_id=post.id,
                declared=declared,
                matched=len(matches),
            )

        if not matches:
            continue

        payload = tag_payload(post.tags)

        for entry in matches:
            # The inventory is a snapshot; files removed since the scan are no longer targets.
            if not entry.path.exists():
                skipped += 1
                if logger is not None:
                    logger.warning("sidecar_target_missing", path=entry.path, post_id=post.id)
                continue

            target = sidecar_path(entry.path, sidecar_extension=sidecar_extension)
            _write_sidecar(target, payload)
            written += 1

            if logger is not None:
                logger.info("sidecar_written", path=target, post_id=post.id, tags=len(post.tags))

    return GenerateResult(
        posts=len(posts),
        matched_posts=matched_posts,
        sidecars_written=written,
        skipped_missing=skipped,
    )
