from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from sidecar.config import apply_overrides, load_config
from sidecar.config_schema import AppConfig
from sidecar.errors import ConfigError


_VALID_YAML = """\
input:
  posts_file: export/posts.xml
  media_dir: export/media
  tag_mappings: remap.csv

sidecar:
  extension: .txt

log:
  path: out/run.log
  overwrite: false
"""


class TestConfig(unittest.TestCase):
    def test_load_config_ok(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text(_VALID_YAML, encoding="utf-8")

            cfg = load_config(path)
            self.assertEqual(cfg.input.posts_file, "export/posts.xml")
            self.assertEqual(cfg.input.media_dir, "export/media")
            self.assertEqual(cfg.input.tag_mappings, "remap.csv")
            self.assertEqual(cfg.sidecar.extension, "txt")
            self.assertEqual(cfg.log.path, "out/run.log")
            self.assertFalse(cfg.log.overwrite)

    def test_empty_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text("", encoding="utf-8")

            cfg = load_config(path)
            self.assertEqual(cfg.input.posts_file, "posts.xml")
            self.assertEqual(cfg.input.media_dir, "media")
            self.assertIsNone(cfg.input.tag_mappings)
            self.assertEqual(cfg.sidecar.extension, "txt")
            self.assertIsNone(cfg.log.path)

    def test_rejects_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text("input:\n  posts: x.xml\n", encoding="utf-8")

            with self.assertRaises(ConfigError) as ctx:
                load_config(path)
            self.assertIn("input.posts", str(ctx.exception))

    def test_rejects_extension_with_separator(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text("sidecar:\n  extension: a/b\n", encoding="utf-8")

            with self.assertRaises(ConfigError):
                load_config(path)

    def test_rejects_non_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text("- a\n- b\n", encoding="utf-8")

            with self.assertRaises(ConfigError):
                load_config(path)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(Path(td) / "missing.yaml")

    def test_apply_overrides_replaces_given_values(self) -> None:
        cfg = AppConfig()

        out = apply_overrides(cfg, posts_file="other.xml", log_path="run.log")

        self.assertEqual(out.input.posts_file, "other.xml")
        self.assertEqual(out.input.media_dir, "media")
        self.assertEqual(out.log.path, "run.log")
        self.assertEqual(cfg.input.posts_file, "posts.xml")

    def test_apply_overrides_validates(self) -> None:
        with self.assertRaises(ConfigError):
            apply_overrides(AppConfig(), media_dir="   ")


if __name__ == "__main__":
    unittest.main()
