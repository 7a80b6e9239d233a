from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import DirectoryUnavailableError
from .run_log import RunLogger


@dataclass(frozen=True)
class FileEntry:
    """A regular file found at the top level of the media directory."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem


def normalize_extension(value: str) -> str:
    return (value or "").strip().lstrip(".")


def entry_matches_post(entry: FileEntry, post_id: str) -> bool:
    """True when the file name without its extension starts with the post id."""
    return bool(post_id) and entry.stem.startswith(post_id)


def build_inventory(
    media_dir: str | Path,
    *,
    sidecar_extension: str = "txt",
    logger: RunLogger | None = None,
) -> list[FileEntry]:
    """
    Snapshot the media files in `media_dir` (top level only).

    Existing sidecar files are excluded so a rerun never treats earlier output as media.
    The result is unordered; entries whose type cannot be read are skipped.
    """
    root = Path(media_dir)
    ext = normalize_extension(sidecar_extension)

    entries: list[FileEntry] = []
    skipped = 0

    try:
        with os.scandir(root) as it:
            for item in it:
                try:
                    is_file = item.is_file()
                except OSError as e:
                    skipped += 1
                    if logger is not None:
                        logger.warning("inventory_entry_skipped", path=item.path, reason=str(e))
                    continue

                if not is_file:
                    continue

                path = Path(item.path)
                if ext and path.suffix == f".{ext}":
                    continue

                entries.append(FileEntry(path=path))
    except OSError as e:
        raise DirectoryUnavailableError(f"Unable to open media directory {root}: {e}") from e

    if logger is not None:
        logger.info("inventory_built", path=root, files=len(entries), skipped=skipped)

    return entries
