"""Depth-first directory traversal with pruning and per-entry error reporting."""

import logging
import os
from enum import Enum
from typing import Callable

from ..errors import StopWalk
from .entities import FileInfo

logger = logging.getLogger(__name__)


class WalkAction(str, Enum):
    """What a visit callback wants the walk to do next."""

    CONTINUE = "continue"
    # On a directory: skip its contents. On a file: skip its remaining siblings.
    SKIP_DIR = "skip_dir"


VisitFunc = Callable[[str, FileInfo], WalkAction]
ErrorFunc = Callable[[str, OSError], None]


def walk(
    root: str,
    visit: VisitFunc,
    on_error: ErrorFunc | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> bool:
    """Walk the tree rooted at ``root`` in depth-first pre-order.

    The root itself is visited first. Entries of each directory are
    visited in sorted name order. Symbolic links are reported but never
    followed.

    Args:
        root: Directory to walk
        visit: Called for every entry with its path and metadata
        on_error: Called with entries that could not be stat'ed or listed
        should_stop: Polled before every entry; the walk aborts when it
                     returns True

    Returns:
        True if the walk completed, False if it was aborted
    """
    try:
        st = os.lstat(root)
    except OSError as e:
        _report(on_error, root, e)
        return True

    try:
        _walk_entry(root, FileInfo.from_stat(root, st), visit, on_error, should_stop)
    except StopWalk:
        logger.debug(f"Walk of {root} aborted")
        return False
    return True


def _walk_entry(
    path: str,
    info: FileInfo,
    visit: VisitFunc,
    on_error: ErrorFunc | None,
    should_stop: Callable[[], bool] | None,
) -> WalkAction:
    """Visit one entry and, for directories, its children.

    Returns the action the parent should apply to the remaining siblings.
    """
    if should_stop is not None and should_stop():
        raise StopWalk(path)

    action = visit(path, info)
    if not info.is_dir:
        return action
    if action is WalkAction.SKIP_DIR:
        # Directory pruned; its siblings are unaffected
        return WalkAction.CONTINUE

    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        _report(on_error, path, e)
        return WalkAction.CONTINUE

    for name in names:
        child = os.path.join(path, name)
        try:
            st = os.lstat(child)
        except OSError as e:
            _report(on_error, child, e)
            continue
        child_action = _walk_entry(
            child, FileInfo.from_stat(child, st), visit, on_error, should_stop
        )
        if child_action is WalkAction.SKIP_DIR:
            break

    return WalkAction.CONTINUE


def _report(on_error: ErrorFunc | None, path: str, error: OSError) -> None:
    if on_error is not None:
        on_error(path, error)
