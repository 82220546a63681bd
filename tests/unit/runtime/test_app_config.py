"""Tests for config persistence and input sanitization.

Malformed or missing config data must fall back to defaults on load.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyfm.runtime import config
from lazyfm.state import SortSpec


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch("lazyfm.runtime.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_missing_file_gives_defaults(self) -> None:
        with mock.patch.dict("os.environ", {"EDITOR": "nano"}, clear=False):
            loaded = config.load_app_config()
        self.assertEqual(loaded.editor, "nano")
        self.assertFalse(loaded.show_hidden)
        self.assertEqual(loaded.sort, SortSpec())
        self.assertEqual(loaded.key_timeout_ms, 1000)
        self.assertEqual(loaded.half_page, config.DEFAULT_HALF_PAGE)

    def test_malformed_json_gives_empty_dict(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(), {})
        self.config_path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_values_are_sanitized(self) -> None:
        config.save_config(
            {
                "editor": "  code --wait ",
                "show_hidden": "yes",
                "sort": {"field": "colour", "order": "desc"},
                "key_timeout_ms": True,
                "half_page": 0,
            }
        )
        loaded = config.load_app_config()
        self.assertEqual(loaded.editor, "code --wait")
        self.assertFalse(loaded.show_hidden)
        self.assertEqual(loaded.sort, SortSpec(field="name", order="desc"))
        self.assertEqual(loaded.key_timeout_ms, 1000)
        self.assertEqual(loaded.half_page, config.DEFAULT_HALF_PAGE)

    def test_valid_values_are_loaded(self) -> None:
        config.save_config({"key_timeout_ms": 400, "half_page": 8, "sort": {"field": "size", "order": "asc"}})
        loaded = config.load_app_config()
        self.assertEqual(loaded.key_timeout_ms, 400)
        self.assertEqual(loaded.half_page, 8)
        self.assertEqual(loaded.sort, SortSpec(field="size"))

    def test_preferences_persist_without_clobbering_other_keys(self) -> None:
        config.save_config({"editor": "vim"})
        config.save_show_hidden(True)
        config.save_sort(SortSpec("modified", "desc"))
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(
            saved,
            {"editor": "vim", "show_hidden": True, "sort": {"field": "modified", "order": "desc"}},
        )

    def test_default_editor_prefers_editor_then_visual(self) -> None:
        with mock.patch.dict("os.environ", {"EDITOR": "", "VISUAL": "emacs"}, clear=False):
            self.assertEqual(config.default_editor(), "emacs")
        with mock.patch.dict("os.environ", {"EDITOR": "", "VISUAL": ""}, clear=False):
            self.assertEqual(config.default_editor(), "vi")


if __name__ == "__main__":
    unittest.main()
