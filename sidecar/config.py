from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config_schema import AppConfig
from .errors import ConfigError


def load_config(path: str | Path) -> AppConfig:
    """
    Load a YAML config file and validate it into a typed AppConfig.

    Raises ConfigError with a readable validation message on failure.
    """
    p = Path(path)

    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {p}") from e

    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {p}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML in {p} must be a mapping/object")

    return _validate(data, source=str(p))


def apply_overrides(
    config: AppConfig,
    *,
    posts_file: str | None = None,
    media_dir: str | None = None,
    tag_mappings: str | None = None,
    log_path: str | None = None,
) -> AppConfig:
    """
    Return a copy of `config` with command-line values replacing file values.

    None means "not given"; the config value is kept.
    """
    data: dict[str, Any] = config.model_dump(mode="python")

    if posts_file is not None:
        data["input"]["posts_file"] = posts_file
    if media_dir is not None:
        data["input"]["media_dir"] = media_dir
    if tag_mappings is not None:
        data["input"]["tag_mappings"] = tag_mappings
    if log_path is not None:
        data["log"]["path"] = log_path

    return _validate(data, source="command line")


def _validate(data: dict[str, Any], *, source: str) -> AppConfig:
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_pydantic_errors(e, source)) from e


def _format_pydantic_errors(err: ValidationError, source: str) -> str:
    lines: list[str] = [f"Invalid configuration in {source}:"]
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", [])) or "<root>"
        msg = item.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
