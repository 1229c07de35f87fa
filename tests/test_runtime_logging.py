from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from dive.runtime_logging import configure_runtime_logging, parse_level


class RuntimeLoggingTests(unittest.TestCase):
    def test_writes_jsonl_and_filters_by_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            logger = configure_runtime_logging(level="info", log_file=path)
            logger.debug("debug.hidden", foo="bar")
            logger.info("info.visible", foo="bar")

            lines = path.read_text(encoding="utf-8").splitlines()
            self.assertGreaterEqual(len(lines), 2)  # includes logging.configured event
            payloads = [json.loads(line) for line in lines]
            self.assertTrue(any(item["event"] == "info.visible" for item in payloads))
            self.assertFalse(any(item["event"] == "debug.hidden" for item in payloads))

    def test_uses_environment_variables(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "from-env.jsonl"
            with patch.dict(
                os.environ,
                {"DIVE_LOG_LEVEL": "debug", "DIVE_LOG_FILE": str(path)},
                clear=False,
            ):
                logger = configure_runtime_logging()
                logger.debug("env.debug", alpha=1)

            lines = path.read_text(encoding="utf-8").splitlines()
            payloads = [json.loads(line) for line in lines]
            self.assertTrue(any(item["event"] == "env.debug" for item in payloads))

    def test_verbose_forces_debug_on_stream(self) -> None:
        stream = io.StringIO()
        with patch.dict(os.environ, {"DIVE_LOG_LEVEL": "error"}, clear=False):
            logger = configure_runtime_logging(verbose=True, stream=stream)
        logger.debug("scan.start", path="a.txt")

        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        self.assertIn("scan.start", events)

    def test_off_level_writes_nothing(self) -> None:
        stream = io.StringIO()
        logger = configure_runtime_logging(level="none", stream=stream)
        logger.error("never.seen")
        self.assertEqual(stream.getvalue(), "")

    def test_parse_level_aliases(self) -> None:
        self.assertEqual(parse_level("WARN"), "warning")
        self.assertEqual(parse_level("disabled"), "off")
        self.assertEqual(parse_level("bogus", default="info"), "info")


if __name__ == "__main__":
    unittest.main()
