"""Persistent JSON config helpers.

Stores the editor command, hidden-file preference, sort order, and key
timing. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..input.matcher import DEFAULT_TIMEOUT_MS
from ..state import SORT_FIELDS, SORT_ORDERS, SortSpec

APP_NAME = "lazyfm"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_HALF_PAGE = 15


@dataclass(frozen=True)
class AppConfig:
    editor: str = "vi"
    show_hidden: bool = False
    sort: SortSpec = field(default_factory=SortSpec)
    key_timeout_ms: int = DEFAULT_TIMEOUT_MS
    half_page: int = DEFAULT_HALF_PAGE


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def default_editor() -> str:
    return os.environ.get("EDITOR") or os.environ.get("VISUAL") or "vi"


def _coerce_positive_int(value: object, default: int) -> int:
    """Booleans, non-integers, and values below one fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def _coerce_sort(value: object) -> SortSpec:
    if not isinstance(value, dict):
        return SortSpec()
    sort_field = value.get("field")
    order = value.get("order")
    return SortSpec(
        field=sort_field if sort_field in SORT_FIELDS else "name",
        order=order if order in SORT_ORDERS else "asc",
    )


def load_app_config() -> AppConfig:
    data = load_config()
    editor = data.get("editor")
    if not isinstance(editor, str) or not editor.strip():
        editor = default_editor()
    show_hidden = data.get("show_hidden")
    return AppConfig(
        editor=editor.strip(),
        show_hidden=show_hidden if isinstance(show_hidden, bool) else False,
        sort=_coerce_sort(data.get("sort")),
        key_timeout_ms=_coerce_positive_int(data.get("key_timeout_ms"), DEFAULT_TIMEOUT_MS),
        half_page=_coerce_positive_int(data.get("half_page"), DEFAULT_HALF_PAGE),
    )


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def save_sort(sort: SortSpec) -> None:
    config = load_config()
    config["sort"] = {"field": sort.field, "order": sort.order}
    save_config(config)
