from __future__ import annotations

import argparse
import sys
from contextlib import nullcontext
from typing import Callable, ContextManager, Sequence

from .config import apply_overrides, load_config
from .config_schema import AppConfig
from .counter import count_tags
from .errors import (
    ConfigError,
    DirectoryUnavailableError,
    MappingFormatError,
    ParseError,
    SidecarWriteError,
)
from .generate import write_sidecar_files
from .inventory import build_inventory
from .mappings import load_tag_mappings
from .missing import find_missing_media, format_missing_media
from .parser import parse_posts
from .post import Post
from .run_log import RunLogger


def _add_common_args(cmd: argparse.ArgumentParser, *, media: bool, mappings: bool) -> None:
    cmd.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    cmd.add_argument(
        "-p",
        "--posts",
        default=None,
        help="Path to the posts.xml export (default: posts.xml).",
    )
    if media:
        cmd.add_argument(
            "-m",
            "--media",
            default=None,
            help="Media directory holding the exported files (default: media).",
        )
    if mappings:
        cmd.add_argument(
            "-t",
            "--tag-mappings",
            default=None,
            help="File of 'source,dest' lines renaming or dropping tags.",
        )
    cmd.add_argument(
        "--log",
        default=None,
        help="Write a JSONL run log to this path.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sidecar",
        description="Generate sidecar files from Tumblr posts.xml files.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser(
        "generate",
        help="Write a tag sidecar file next to every media file of every post.",
    )
    _add_common_args(gen, media=True, mappings=True)
    gen.set_defaults(_handler=_cmd_generate)

    analyze = subparsers.add_parser(
        "analyze",
        help="Print tag frequencies across all posts.",
    )
    _add_common_args(analyze, media=False, mappings=True)
    analyze.set_defaults(_handler=_cmd_analyze)

    missing = subparsers.add_parser(
        "missing",
        help="List photo posts with no media file in the media directory.",
    )
    _add_common_args(missing, media=True, mappings=False)
    missing.set_defaults(_handler=_cmd_missing)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(args.config) if args.config else AppConfig()
    return apply_overrides(
        cfg,
        posts_file=getattr(args, "posts", None),
        media_dir=getattr(args, "media", None),
        tag_mappings=getattr(args, "tag_mappings", None),
        log_path=getattr(args, "log", None),
    )


def _open_log(cfg: AppConfig, command: str) -> ContextManager[RunLogger | None]:
    if not cfg.log.path:
        return nullcontext(None)
    return RunLogger.open(cfg.log.path, overwrite=cfg.log.overwrite, command=command)


def _load_posts(cfg: AppConfig, log: RunLogger | None, *, use_mappings: bool) -> list[Post]:
    mappings = None
    if use_mappings and cfg.input.tag_mappings:
        mappings = load_tag_mappings(cfg.input.tag_mappings)
    return parse_posts(cfg.input.posts_file, mappings, logger=log)


def _run_logged(
    args: argparse.Namespace,
    command: str,
    body: Callable[[AppConfig, RunLogger | None], int],
) -> int:
    cfg = _resolve_config(args)

    with _open_log(cfg, command) as log:
        if log is not None:
            log.info(
                "command_started",
                posts_file=cfg.input.posts_file,
                media_dir=cfg.input.media_dir,
                tag_mappings=cfg.input.tag_mappings,
            )
        try:
            return body(cfg, log)
        except Exception as e:
            if log is not None:
                log.exception("command_failed", exc=e)
            raise


def _generate(cfg: AppConfig, log: RunLogger | None) -> int:
    posts = _load_posts(cfg, log, use_mappings=True)
    inventory = build_inventory(
        cfg.input.media_dir,
        sidecar_extension=cfg.sidecar.extension,
        logger=log,
    )
    result = write_sidecar_files(
        posts,
        inventory,
        sidecar_extension=cfg.sidecar.extension,
        logger=log,
    )

    print(f"posts={result.posts}")
    print(f"matched_posts={result.matched_posts}")
    print(f"sidecars_written={result.sidecars_written}")
    print(f"skipped_missing={result.skipped_missing}")
    return 0


def _analyze(cfg: AppConfig, log: RunLogger | None) -> int:
    posts = _load_posts(cfg, log, use_mappings=True)
    for tag_count in count_tags(posts):
        print(tag_count)
    return 0


def _missing(cfg: AppConfig, log: RunLogger | None) -> int:
    posts = _load_posts(cfg, log, use_mappings=False)
    inventory = build_inventory(
        cfg.input.media_dir,
        sidecar_extension=cfg.sidecar.extension,
        logger=log,
    )
    for item in find_missing_media(posts, inventory):
        print(format_missing_media(item))
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    return _run_logged(args, "generate", _generate)


def _cmd_analyze(args: argparse.Namespace) -> int:
    return _run_logged(args, "analyze", _analyze)


def _cmd_missing(args: argparse.Namespace) -> int:
    return _run_logged(args, "missing", _missing)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except (ConfigError, MappingFormatError) as e:
        _eprint(f"error: {e}")
        return 2
    except (ParseError, DirectoryUnavailableError, SidecarWriteError) as e:
        _eprint(f"error: {e}")
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
