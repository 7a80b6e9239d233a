from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from sidecar.run_log import RunLogger


def _records(path: Path) -> list[dict]:
    return [
        json.loads(ln)
        for ln in path.read_text(encoding="utf-8").splitlines()
        if ln.strip()
    ]


class TestRunLogger(unittest.TestCase):
    def test_writes_one_json_object_per_line(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "logs" / "run.log"

            with RunLogger.open(path, command="generate", session_id="s1") as log:
                log.info("sidecar_written", path=Path("media/1.jpg.txt"), tags=2)
                log.warning("media_count_mismatch", post_id="1")

            records = _records(path)
            self.assertEqual(len(records), 2)
            self.assertEqual(records[0]["event"], "sidecar_written")
            self.assertEqual(records[0]["level"], "INFO")
            self.assertEqual(records[0]["command"], "generate")
            self.assertEqual(records[0]["session_id"], "s1")
            self.assertEqual(records[0]["path"], str(Path("media/1.jpg.txt")))
            self.assertEqual(records[0]["data"], {"tags": 2})
            self.assertEqual(records[1]["level"], "WARN")
            self.assertNotIn("path", records[1])

    def test_exception_records_type_and_message(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "run.log"

            with RunLogger.open(path) as log:
                try:
                    raise ValueError("boom")
                except ValueError as e:
                    log.exception("command_failed", exc=e)

            record = _records(path)[0]
            self.assertEqual(record["level"], "ERROR")
            self.assertEqual(record["data"]["error"]["type"], "ValueError")
            self.assertEqual(record["data"]["error"]["message"], "boom")
            self.assertIn("Traceback", record["data"]["error"]["traceback"])

    def test_append_mode_keeps_previous_lines(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "run.log"

            with RunLogger.open(path) as log:
                log.info("first")
            with RunLogger.open(path, overwrite=False) as log:
                log.info("second")

            self.assertEqual([r["event"] for r in _records(path)], ["first", "second"])


if __name__ == "__main__":
    unittest.main()
