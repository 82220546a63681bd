"""``:`` command dispatcher."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from ..actions import Action, RequestRefresh, SetError, SetMessage, SetSort, ToggleHidden
from ..fs.operations import create_directory, create_file
from ..state import SORT_FIELDS, SORT_ORDERS, SortSpec
from .registry import ActionContext

logger = logging.getLogger(__name__)


def _resolve(ctx: ActionContext, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = ctx.state.current_path / path
    return path


def _cd(ctx: ActionContext, args: list[str]) -> None:
    target = _resolve(ctx, args[0]) if args else Path.home()
    if not target.is_dir():
        ctx.dispatch(SetError(f"Not a directory: {target}"))
        return
    ctx.navigate(target.resolve())


def _create(ctx: ActionContext, args: list[str], label: str, create) -> None:
    if not args:
        ctx.dispatch(SetError(f"{label}: missing name"))
        return
    targets = [_resolve(ctx, name) for name in args]

    def job() -> list[Action]:
        try:
            for target in targets:
                create(target)
        except OSError as exc:
            logger.warning("%s failed: %s", label, exc)
            return [SetError(f"{label} failed: {exc}")]
        return [RequestRefresh()]

    ctx.run_in_background(job)


def _sort(ctx: ActionContext, args: list[str]) -> None:
    if not args or args[0] not in SORT_FIELDS:
        ctx.dispatch(SetError(f"sort: expected one of {', '.join(SORT_FIELDS)}"))
        return
    order = args[1] if len(args) > 1 else "asc"
    if order not in SORT_ORDERS:
        ctx.dispatch(SetError(f"sort: expected one of {', '.join(SORT_ORDERS)}"))
        return
    ctx.dispatch(SetSort(SortSpec(field=args[0], order=order)))
    ctx.dispatch(SetMessage(f"Sorted by {args[0]} ({order})"))


def execute_command(command: str, ctx: ActionContext) -> None:
    """Run one ``:`` command line against ``ctx``."""
    try:
        parts = shlex.split(command)
    except ValueError as exc:
        ctx.dispatch(SetError(f"Invalid command: {exc}"))
        return
    if not parts:
        return

    name, args = parts[0], parts[1:]
    logger.debug("command %s %s", name, args)
    if name in {"q", "quit"}:
        ctx.exit()
    elif name == "cd":
        _cd(ctx, args)
    elif name == "mkdir":
        _create(ctx, args, "mkdir", create_directory)
    elif name == "touch":
        _create(ctx, args, "touch", create_file)
    elif name == "sort":
        _sort(ctx, args)
    elif name == "hidden":
        ctx.dispatch(ToggleHidden())
    else:
        ctx.dispatch(SetError(f"Unknown command: {name}"))
