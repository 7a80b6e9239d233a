from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from .errors import MappingFormatError

TagMappings = Mapping[str, Optional[str]]


def parse_tag_mappings(text: str, *, source: str = "<string>") -> dict[str, str | None]:
    """
    Parse `source,dest` lines into a remap table.

    An empty `dest` maps the source tag to None, which drops it. Blank lines are skipped.
    """
    mappings: dict[str, str | None] = {}

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        fields = [part.strip() for part in line.split(",")]
        if len(fields) != 2:
            raise MappingFormatError(
                f"Invalid tag mapping in {source} at line {lineno}: "
                f"expected 'source,dest', got {raw_line!r}"
            )

        src, dest = fields
        if not src:
            raise MappingFormatError(
                f"Invalid tag mapping in {source} at line {lineno}: empty source tag"
            )

        mappings[src] = dest or None

    return mappings


def load_tag_mappings(path: str | Path) -> dict[str, str | None]:
    p = Path(path)

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MappingFormatError(f"Failed to read tag mapping file {p}: {e}") from e

    return parse_tag_mappings(text, source=str(p))
