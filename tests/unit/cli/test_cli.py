"""CLI argument and start-path behavior tests.

Verifies how ``lazyfm.cli.main`` chooses the start directory and merges
command-line overrides over the persisted config.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyfm import cli
from lazyfm.runtime.config import AppConfig


class CliStartPathTests(unittest.TestCase):
    def test_main_defaults_to_current_working_directory_when_no_path_arg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            previous_cwd = Path.cwd()
            try:
                os.chdir(root)
                with (
                    mock.patch("lazyfm.cli.run_app") as run_app,
                    mock.patch("lazyfm.cli.configure_logging") as configure_logging,
                    mock.patch("lazyfm.cli.load_app_config", return_value=AppConfig()),
                ):
                    cli.main([])
            finally:
                os.chdir(previous_cwd)

        start, config = run_app.call_args.args
        self.assertEqual(start.resolve(), root)
        self.assertEqual(config, AppConfig())
        configure_logging.assert_called_once_with("WARNING", None)

    def test_main_uses_default_path_argument(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with (
                mock.patch("lazyfm.cli.run_app") as run_app,
                mock.patch("lazyfm.cli.configure_logging"),
                mock.patch("lazyfm.cli.load_app_config", return_value=AppConfig()),
            ):
                cli.main([], default_path=root)

        self.assertEqual(run_app.call_args.args[0], root)

    def test_file_argument_opens_parent_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "notes.txt"
            target.write_text("hi\n", encoding="utf-8")
            self.assertEqual(cli.resolve_start_path(str(target)), root)

    def test_missing_path_exits_with_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "nope"
            with mock.patch("lazyfm.cli.run_app") as run_app:
                with self.assertRaises(SystemExit) as raised:
                    cli.main([str(missing)])

        self.assertEqual(str(raised.exception), f"Path not found: {missing}")
        run_app.assert_not_called()


class CliOptionTests(unittest.TestCase):
    def test_keys_prints_bindings_without_launching(self) -> None:
        out = io.StringIO()
        with mock.patch("sys.stdout", out), mock.patch("lazyfm.cli.run_app") as run_app:
            cli.main(["--keys"])

        text = out.getvalue()
        self.assertIn("NORMAL", text)
        self.assertIn("Go to first file", text)
        run_app.assert_not_called()

    def test_overrides_are_merged_over_config(self) -> None:
        args = cli.build_parser().parse_args(["--editor", "nano -w", "--show-hidden", "--timeout-ms", "250"])
        merged = cli.merge_config(AppConfig(editor="vim"), args)
        self.assertEqual(merged.editor, "nano -w")
        self.assertTrue(merged.show_hidden)
        self.assertEqual(merged.key_timeout_ms, 250)

    def test_absent_overrides_keep_config(self) -> None:
        config = AppConfig(editor="hx", show_hidden=True, key_timeout_ms=900)
        args = cli.build_parser().parse_args([])
        self.assertEqual(cli.merge_config(config, args), config)

    def test_log_level_is_case_insensitive(self) -> None:
        args = cli.build_parser().parse_args(["--log-level", "debug"])
        self.assertEqual(args.log_level, "DEBUG")

    def test_timeout_must_be_positive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.build_parser().parse_args(["--timeout-ms", "0"])


if __name__ == "__main__":
    unittest.main()
