"""Editor launch and clipboard helper tests with patched subprocesses."""

from __future__ import annotations

import subprocess
import unittest
from pathlib import Path
from unittest import mock

from lazyfm import clipboard, editor


class EditorCommandTests(unittest.TestCase):
    def test_line_is_passed_before_target(self) -> None:
        cmd = editor.editor_command("code --wait", Path("/repo/a.py"), 12)
        self.assertEqual(cmd, ["code", "--wait", "+12", "/repo/a.py"])

    def test_no_line_argument_without_line(self) -> None:
        self.assertEqual(editor.editor_command("vi", Path("/repo/a.py")), ["vi", "/repo/a.py"])

    def test_launch_restores_tui_mode_around_editor(self) -> None:
        calls: list[str] = []
        with mock.patch("lazyfm.editor.subprocess.run", side_effect=lambda *a, **k: calls.append("run")):
            error = editor.launch_editor(
                "vi",
                Path("/repo/a.py"),
                lambda: calls.append("disable"),
                lambda: calls.append("enable"),
            )
        self.assertIsNone(error)
        self.assertEqual(calls, ["disable", "run", "enable"])

    def test_launch_failure_becomes_message(self) -> None:
        with mock.patch("lazyfm.editor.subprocess.run", side_effect=FileNotFoundError("nope")):
            error = editor.launch_editor("missing-editor", Path("/a"), lambda: None, lambda: None)
        self.assertTrue(error.startswith("Failed to launch editor:"))

    def test_blank_editor_is_rejected(self) -> None:
        self.assertEqual(
            editor.launch_editor("  ", Path("/a"), lambda: None, lambda: None),
            "Cannot edit: no editor configured.",
        )


class ClipboardTests(unittest.TestCase):
    def test_first_available_tool_wins(self) -> None:
        with mock.patch("lazyfm.clipboard.shutil.which", side_effect=lambda name: name if name == "xclip" else None):
            self.assertEqual(clipboard.clipboard_command(), ["xclip", "-selection", "clipboard"])

    def test_missing_tool_raises(self) -> None:
        with mock.patch("lazyfm.clipboard.shutil.which", return_value=None):
            with self.assertRaises(clipboard.ClipboardError):
                clipboard.copy_to_clipboard("text")

    def test_text_is_piped_to_tool(self) -> None:
        done = subprocess.CompletedProcess(args=["pbcopy"], returncode=0, stdout="", stderr="")
        with (
            mock.patch("lazyfm.clipboard.clipboard_command", return_value=["pbcopy"]),
            mock.patch("lazyfm.clipboard.subprocess.run", return_value=done) as run,
        ):
            clipboard.copy_to_clipboard("line one\nline two")
        self.assertEqual(run.call_args.kwargs["input"], "line one\nline two")

    def test_tool_failure_raises_with_stderr(self) -> None:
        failed = subprocess.CompletedProcess(args=["pbcopy"], returncode=1, stdout="", stderr="denied\n")
        with (
            mock.patch("lazyfm.clipboard.clipboard_command", return_value=["pbcopy"]),
            mock.patch("lazyfm.clipboard.subprocess.run", return_value=failed),
        ):
            with self.assertRaises(clipboard.ClipboardError) as raised:
                clipboard.copy_to_clipboard("x")
        self.assertEqual(str(raised.exception), "denied")


if __name__ == "__main__":
    unittest.main()
