"""Filesystem mutations invoked by key handlers and commands.

Every function raises ``OSError`` on failure; callers turn that into an
error message for the status line.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from ..state import FileEntry

logger = logging.getLogger(__name__)


def _destination(source: Path, dest_dir: Path) -> Path:
    return dest_dir / source.name


def copy_files(sources: Iterable[FileEntry], dest_dir: Path) -> None:
    for source in sources:
        target = _destination(source.path, dest_dir)
        logger.info("copy %s -> %s", source.path, target)
        if source.is_dir and not source.is_symlink:
            shutil.copytree(source.path, target, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(source.path, target, follow_symlinks=False)


def move_files(sources: Iterable[FileEntry], dest_dir: Path) -> None:
    for source in sources:
        target = _destination(source.path, dest_dir)
        if target == source.path:
            continue
        logger.info("move %s -> %s", source.path, target)
        shutil.move(str(source.path), str(target))


def delete_files(entries: Iterable[FileEntry]) -> None:
    for entry in entries:
        logger.info("delete %s", entry.path)
        if entry.is_dir and not entry.is_symlink:
            shutil.rmtree(entry.path)
        else:
            entry.path.unlink(missing_ok=True)


def rename_file(old_path: Path, new_name: str) -> Path:
    """Rename within the same directory and return the new path."""
    if not new_name or "/" in new_name:
        raise OSError(f"invalid name: {new_name!r}")
    new_path = old_path.parent / new_name
    if new_path.exists():
        raise FileExistsError(f"{new_name} already exists")
    logger.info("rename %s -> %s", old_path, new_path)
    old_path.rename(new_path)
    return new_path


def create_directory(dir_path: Path) -> None:
    logger.info("mkdir %s", dir_path)
    dir_path.mkdir(parents=True, exist_ok=True)


def create_file(file_path: Path) -> None:
    logger.info("touch %s", file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.touch(exist_ok=True)
