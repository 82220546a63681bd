"""Tests for directory listing, sorting, and entry formatting."""

from __future__ import annotations

import os
import tempfile
import time
import unittest
from pathlib import Path

from lazyfm.fs.entries import build_entry, format_modified, format_permissions, format_size, read_directory, sort_entries
from lazyfm.state import FileEntry, SortSpec


class FormattingTests(unittest.TestCase):
    def test_format_permissions(self) -> None:
        self.assertEqual(format_permissions(0o755), "rwxr-xr-x")
        self.assertEqual(format_permissions(0o640), "rw-r-----")
        self.assertEqual(format_permissions(0), "---------")

    def test_format_size(self) -> None:
        self.assertEqual(format_size(0), "   0B")
        self.assertEqual(format_size(512), " 512B")
        self.assertEqual(format_size(1536), " 1.5K")
        self.assertEqual(format_size(20 * 1024 * 1024), "  20M")

    def test_format_modified_switches_to_year_for_old_files(self) -> None:
        now = time.mktime((2024, 6, 15, 12, 0, 0, 0, 0, -1))
        recent = time.mktime((2024, 3, 2, 9, 5, 0, 0, 0, -1))
        old = time.mktime((2021, 3, 2, 9, 5, 0, 0, 0, -1))
        self.assertEqual(format_modified(recent, now=now), "Mar  2 09:05")
        self.assertEqual(format_modified(old, now=now), "Mar  2  2021")


class SortTests(unittest.TestCase):
    def _entries(self) -> list[FileEntry]:
        root = Path("/srv")
        return [
            FileEntry(name="b.txt", path=root / "b.txt", is_dir=False, size=10, modified=3.0),
            FileEntry(name="Zdir", path=root / "Zdir", is_dir=True, size=0, modified=1.0),
            FileEntry(name="a.txt", path=root / "a.txt", is_dir=False, size=30, modified=2.0),
            FileEntry(name="adir", path=root / "adir", is_dir=True, size=0, modified=5.0),
        ]

    def test_directories_first_then_case_insensitive_name(self) -> None:
        names = [e.name for e in sort_entries(self._entries(), SortSpec())]
        self.assertEqual(names, ["adir", "Zdir", "a.txt", "b.txt"])

    def test_size_descending(self) -> None:
        names = [e.name for e in sort_entries(self._entries(), SortSpec("size", "desc"))]
        self.assertEqual(names[2:], ["a.txt", "b.txt"])

    def test_modified_ascending(self) -> None:
        names = [e.name for e in sort_entries(self._entries(), SortSpec("modified", "asc"))]
        self.assertEqual(names, ["Zdir", "adir", "a.txt", "b.txt"])


class ReadDirectoryTests(unittest.TestCase):
    def test_lists_entries_and_hides_dotfiles(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            (root / "file.py").write_text("print(1)\n", encoding="utf-8")
            (root / ".hidden").write_text("", encoding="utf-8")

            visible = read_directory(root, show_hidden=False)
            self.assertEqual([e.name for e in visible], ["sub", "file.py"])
            self.assertTrue(visible[0].is_dir)
            self.assertEqual(visible[1].size, len("print(1)\n"))

            everything = read_directory(root, show_hidden=True)
            self.assertIn(".hidden", [e.name for e in everything])

    def test_missing_directory_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                read_directory(Path(tmp) / "missing", show_hidden=False)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlink_to_directory_counts_as_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "real").mkdir()
            (root / "link").symlink_to(root / "real")
            (root / "dangling").symlink_to(root / "nothing")
            link = build_entry(root / "link")
            self.assertTrue(link.is_dir)
            self.assertTrue(link.is_symlink)
            dangling = build_entry(root / "dangling")
            self.assertFalse(dangling.is_dir)
            self.assertTrue(dangling.is_symlink)


if __name__ == "__main__":
    unittest.main()
