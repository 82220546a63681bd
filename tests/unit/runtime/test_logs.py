"""Tests for file-only logging setup."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from lazyfm.runtime.logs import configure_logging


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        root = logging.getLogger("lazyfm")
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def test_writes_records_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "logs" / "lazyfm.log"
            self.assertEqual(configure_logging("debug", target), target)
            logging.getLogger("lazyfm.input.matcher").debug("pending %s", ["d"])
            for handler in logging.getLogger("lazyfm").handlers:
                handler.flush()
            text = target.read_text(encoding="utf-8")
            self.assertIn("lazyfm.input.matcher - DEBUG - pending ['d']", text)

    def test_reconfiguring_replaces_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            configure_logging("INFO", Path(tmp) / "a.log")
            configure_logging("INFO", Path(tmp) / "b.log")
            root = logging.getLogger("lazyfm")
            self.assertEqual(len(root.handlers), 1)
            self.assertFalse(root.propagate)
            self.assertEqual(root.level, logging.INFO)

    def test_unwritable_location_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            self.assertIsNone(configure_logging("INFO", blocker / "sub" / "x.log"))


if __name__ == "__main__":
    unittest.main()
