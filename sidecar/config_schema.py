from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _non_empty_path(value: str) -> str:
    p = (value or "").strip()
    if not p:
        raise ValueError("must be a non-empty path")
    return p


def _optional_path(value: str | None) -> str | None:
    if value is None:
        return None
    p = value.strip()
    return p or None


class InputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    posts_file: str = "posts.xml"
    media_dir: str = "media"
    tag_mappings: str | None = None

    @field_validator("posts_file", "media_dir")
    @classmethod
    def _paths_must_be_set(cls, v: str) -> str:
        return _non_empty_path(v)

    @field_validator("tag_mappings")
    @classmethod
    def _blank_mappings_means_none(cls, v: str | None) -> str | None:
        return _optional_path(v)


class SidecarConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    extension: str = "txt"

    @field_validator("extension")
    @classmethod
    def _extension_must_be_plain(cls, v: str) -> str:
        ext = (v or "").strip().lstrip(".")
        if not ext:
            raise ValueError("must be a non-empty file extension")
        if "/" in ext or "\\" in ext:
            raise ValueError("must not contain a path separator")
        return ext


class LogConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str | None = None
    overwrite: bool = True

    @field_validator("path")
    @classmethod
    def _blank_path_means_none(cls, v: str | None) -> str | None:
        return _optional_path(v)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    input: InputConfig = Field(default_factory=InputConfig)
    sidecar: SidecarConfig = Field(default_factory=SidecarConfig)
    log: LogConfig = Field(default_factory=LogConfig)
